"""
Auth provider integration.
Resolves a bearer access token to the current user via the Supabase auth endpoint.
"""
from typing import Any, Optional

import aiohttp

from app.config import AUTH_PATH, get_supabase_credentials
from app.models.schemas.accounts import AuthSession, CurrentUser
from app.utils import get_logger

logger = get_logger(__name__)

class SupabaseAuthProvider:
    """Bearer token -> AuthSession.

    A missing token yields ``AuthSession(user=None, access_token=None)``; a
    token the auth server rejects yields ``AuthSession(user=None, access_token=token)``
    so callers can tell "no token" from "not authenticated".
    """

    def __init__(self, *, session: Optional[aiohttp.ClientSession] = None):
        base_url, anon_key = get_supabase_credentials()
        self.url = f"{base_url}{AUTH_PATH}/user"
        self.anon_key = anon_key
        self._session = session

    async def get_session(self, access_token: Optional[str]) -> AuthSession:
        if not access_token:
            return AuthSession(user=None, access_token=None)

        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token}",
        }
        if self._session is not None:
            user = await self._get_user(self._session, headers)
        else:
            async with aiohttp.ClientSession() as session:
                user = await self._get_user(session, headers)
        return AuthSession(user=user, access_token=access_token)

    async def _get_user(self, session: Any, headers: dict) -> Optional[CurrentUser]:
        async with session.get(self.url, headers=headers) as response:
            if response.status in (401, 403):
                logger.warning("Access token rejected by auth provider", status_code=response.status)
                return None
            if response.status != 200:
                body = await response.text()
                raise RuntimeError(f"Auth provider returned status {response.status}: {body}")
            data = await response.json()
        return CurrentUser.model_validate(data)
