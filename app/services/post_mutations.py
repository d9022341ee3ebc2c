"""Create-post pipeline.

The only blog flow that raises to its caller: auth failures before any network
call, transport/GraphQL failures with the server message verbatim, and
PostCreationError when the server answers without a record. Every post
created here is published immediately.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

from pydantic import ValidationError

from app.graphql.client import GraphQLClient, create_graphql_client
from app.graphql.mutations import CREATE_BLOG_POST
from app.models.schemas.accounts import AuthSession, CurrentUser
from app.models.schemas.posts import BlogPost, PostCreate
from app.utils import get_logger, log_business_event
from app.utils.time import isoformat_utc

logger = get_logger(__name__)


class AuthenticationError(Exception):
    """Caller has no authenticated user or no access token."""


class PostValidationError(ValueError):
    """Title/body outside the accepted bounds."""


class PostCreationError(Exception):
    """Server accepted the mutation but returned no created record."""


def validate_post_input(title: str, body: str) -> PostCreate:
    """Check title/body bounds; raise PostValidationError with the first problem."""
    try:
        return PostCreate(title=title, body=body)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "payload"
        raise PostValidationError(f"{field}: {first.get('msg', 'invalid value')}") from e


def require_authenticated(session: Optional[AuthSession]) -> Tuple[CurrentUser, str]:
    if session is None or session.user is None:
        raise AuthenticationError("User must be authenticated to create a post")
    if not session.access_token:
        raise AuthenticationError("No access token available")
    return session.user, session.access_token


async def create_post(
    title: str,
    body: str,
    session: Optional[AuthSession],
    *,
    client: Optional[GraphQLClient] = None,
    now: Optional[datetime] = None,
) -> BlogPost:
    """Submit a published post authored by the session's user and return the created record."""
    user, access_token = require_authenticated(session)

    client = client or create_graphql_client()
    response = await client.authenticated_request(
        CREATE_BLOG_POST,
        access_token,
        {
            "title": title,
            "body": body,
            "author_id": user.id,
            "published_at": isoformat_utc(now),
        },
    )

    if not response.data:
        raise PostCreationError("No data returned from GraphQL mutation")

    records = (response.data.get("insertIntoblog_postsCollection") or {}).get("records") or []
    if not records:
        logger.error("Create mutation returned no records", user_id=user.id)
        raise PostCreationError("Failed to create blog post")

    post = BlogPost.model_validate(records[0])
    log_business_event(
        "blog_post_created",
        {"post_id": post.id, "title_length": len(post.title)},
        user_id=user.id,
    )
    return post


__all__ = [
    "AuthenticationError",
    "PostValidationError",
    "PostCreationError",
    "validate_post_input",
    "require_authenticated",
    "create_post",
]
