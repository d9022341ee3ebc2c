"""
Dependencies for authentication, the response cache and the blog query facade.
"""
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.cache.response_cache import ResponseCache, create_response_cache
from app.integrations.auth import SupabaseAuthProvider
from app.models.schemas.accounts import AuthSession
from app.services.blog_queries import BlogQueryService
from app.utils import get_logger

logger = get_logger(__name__)
security = HTTPBearer(auto_error=False)

def get_response_cache(request: Request) -> ResponseCache:
    """
    Process-wide response cache stored on app.state by the lifespan handler.
    Created lazily when the app runs without lifespan (e.g. some test clients).
    """
    cache = getattr(request.app.state, "response_cache", None)
    if cache is None:
        cache = create_response_cache()
        request.app.state.response_cache = cache
    return cache

def get_blog_query_service(cache: ResponseCache = Depends(get_response_cache)) -> BlogQueryService:
    return BlogQueryService(cache)

def get_auth_provider() -> SupabaseAuthProvider:
    return SupabaseAuthProvider()

async def get_auth_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    provider: SupabaseAuthProvider = Depends(get_auth_provider),
) -> AuthSession:
    """
    Resolve the caller's identity from an optional bearer token.

    Returns an unauthenticated AuthSession rather than failing, so the create
    pipeline decides how to reject it.
    """
    token = credentials.credentials if credentials else None
    session = await provider.get_session(token)

    if session.user is None:
        logger.debug("Request without an authenticated user", has_token=bool(token))
    else:
        logger.debug("User authenticated", user_id=session.user.id)

    return session
