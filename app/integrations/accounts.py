"""
Accounts store integration.
Read-only lookup of account display fields through the Supabase REST endpoint.
"""
from typing import Any, Iterable, List, Optional

import aiohttp

from app.config import REST_PATH, get_supabase_credentials
from app.models.schemas.accounts import Account
from app.utils import get_logger

logger = get_logger(__name__)

class AccountsLookupError(Exception):
    """The accounts store rejected or failed the lookup."""

    def __init__(self, message: str, *, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

class AccountsStore:
    """Fetches ``accounts`` rows (id, name, email) by id membership.

    Row visibility is decided server-side, so fewer rows than requested ids is
    a normal answer, not an error.
    """

    def __init__(self, *, session: Optional[aiohttp.ClientSession] = None, access_token: Optional[str] = None):
        base_url, anon_key = get_supabase_credentials()
        self.url = f"{base_url}{REST_PATH}/accounts"
        self.anon_key = anon_key
        self.access_token = access_token or anon_key
        self._session = session

    async def fetch_accounts(self, account_ids: Iterable[str]) -> List[Account]:
        ids = list(dict.fromkeys(account_ids))
        if not ids:
            return []

        params = {
            "select": "id,name,email",
            "id": f"in.({','.join(ids)})",
        }
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
        }

        logger.debug("Fetching accounts", requested=len(ids))

        if self._session is not None:
            rows = await self._get(self._session, params, headers)
        else:
            async with aiohttp.ClientSession() as session:
                rows = await self._get(session, params, headers)

        return [Account.model_validate(row) for row in rows]

    async def _get(self, session: Any, params: dict, headers: dict) -> List[dict]:
        async with session.get(self.url, params=params, headers=headers) as response:
            if response.status != 200:
                body = await response.text()
                raise AccountsLookupError(
                    f"Accounts lookup failed with status {response.status}: {body}",
                    status=response.status,
                )
            data = await response.json()
            if not isinstance(data, list):
                raise AccountsLookupError("Accounts lookup returned an unexpected payload")
            return data

def create_accounts_store(**kwargs: Any) -> AccountsStore:
    return AccountsStore(**kwargs)
