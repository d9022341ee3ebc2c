"""
Pydantic schemas for the external accounts store and the auth collaborator.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict

class Account(BaseModel):
    """Row of the ``accounts`` table; read-only from this service."""
    id: str
    name: str
    email: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

class CurrentUser(BaseModel):
    id: str
    email: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

class AuthSession(BaseModel):
    """Identity resolved for a caller.

    ``user`` is None when the caller is not authenticated; ``access_token`` is
    None when no token was supplied at all.
    """
    user: Optional[CurrentUser] = None
    access_token: Optional[str] = None
