"""
Integrations package initialization.
Exports the external collaborators: accounts store and auth provider.
"""
from .accounts import AccountsStore, AccountsLookupError, create_accounts_store
from .auth import SupabaseAuthProvider

__all__ = [
    "AccountsStore",
    "AccountsLookupError",
    "create_accounts_store",
    "SupabaseAuthProvider",
]
