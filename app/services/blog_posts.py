"""Read pipelines for blog posts: paginated listing and single-post lookup.

Both public functions are total. Every failure (configuration, transport,
GraphQL errors, malformed payloads) is logged and turned into a safe default:
an empty connection for the listing, ``None`` for the lookup. The
``fetch_*`` helpers return a Result so callers that need to tell a genuine
empty answer from a failure (the response cache) can do so.
"""
from __future__ import annotations

import re
import time
from typing import Any, Dict, Optional

from app.config import PAGINATION_SETTINGS
from app.graphql.client import GraphQLClient, create_graphql_client
from app.graphql.queries import GET_BLOG_POSTS, GET_BLOG_POST_BY_ID, published_posts_variables
from app.models.schemas.posts import BlogPost, BlogPostConnection, BlogPostEdge, PageInfo
from app.services.pagination import compute_fetch_size, slice_page
from app.utils import Result, get_logger, log_performance

logger = get_logger(__name__)

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

# Postgres rejection of a malformed uuid literal; expected, not logged.
INVALID_UUID_MARKER = "invalid input syntax for type uuid"


def is_valid_uuid(value: str) -> bool:
    return bool(value) and UUID_PATTERN.match(value) is not None


def _collection(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not data:
        raise ValueError("No data returned from GraphQL query")
    collection = data.get("blog_postsCollection")
    if not isinstance(collection, dict):
        raise ValueError("GraphQL response is missing blog_postsCollection")
    return collection


async def fetch_published_posts_page(
    page: int,
    page_size: int,
    *,
    client: Optional[GraphQLClient] = None,
) -> Result[BlogPostConnection]:
    """Fetch the over-fetch window and slice ``page`` out of it."""
    try:
        fetch_size = compute_fetch_size(page, page_size)
        client = client or create_graphql_client()
        response = await client.request(GET_BLOG_POSTS, published_posts_variables(fetch_size))
        fetched = BlogPostConnection.model_validate(_collection(response.data))
        window = slice_page(fetched.edges, page, page_size)
        return Result.success(BlogPostConnection(
            edges=window.items,
            page_info=PageInfo(
                has_next_page=window.has_next_page,
                has_previous_page=window.has_previous_page,
            ),
        ))
    except Exception as e:  # routed to the log at the boundary
        return Result.failure(e)


def unwrap_listing(result: Result[BlogPostConnection], page: int, page_size: int) -> BlogPostConnection:
    """Connection of a listing Result; a failure is logged and becomes the empty connection."""
    if not result.ok:
        logger.error(
            "Error fetching blog posts",
            page=page,
            page_size=page_size,
            error=str(result.error),
            error_type=type(result.error).__name__,
        )
    return result.unwrap_or(BlogPostConnection.empty())


def unwrap_post(result: Result[Optional[BlogPost]], post_id: str) -> Optional[BlogPost]:
    """Post of a lookup Result; a failure is logged and becomes ``None``."""
    if not result.ok:
        logger.error(
            "Error fetching blog post by ID",
            post_id=post_id,
            error=str(result.error),
            error_type=type(result.error).__name__,
        )
    return result.unwrap_or(None)


async def list_published_posts(
    page: int = 1,
    page_size: Optional[int] = None,
    *,
    client: Optional[GraphQLClient] = None,
) -> BlogPostConnection:
    """Page of published posts, newest first. Never raises."""
    page_size = page_size or int(PAGINATION_SETTINGS["default_page_size"])
    start_time = time.time()
    result = await fetch_published_posts_page(page, page_size, client=client)
    connection = unwrap_listing(result, page, page_size)
    if not result.ok:
        return connection
    log_performance(
        operation="list_published_posts",
        duration_ms=(time.time() - start_time) * 1000,
        additional_data={"page": page, "page_size": page_size, "returned": len(connection.edges)},
    )
    return connection


async def fetch_post_by_id(post_id: str, *, client: Optional[GraphQLClient] = None) -> Result[Optional[BlogPost]]:
    """Result of a by-id lookup. Malformed ids succeed with ``None`` without a network call."""
    if not is_valid_uuid(post_id):
        return Result.success(None)
    try:
        client = client or create_graphql_client()
        response = await client.request(GET_BLOG_POST_BY_ID, {"id": post_id})
        if not response.data:
            return Result.success(None)
        edges = _collection(response.data).get("edges") or []
        if not edges or not edges[0]:
            return Result.success(None)
        return Result.success(BlogPostEdge.model_validate(edges[0]).node)
    except Exception as e:
        if INVALID_UUID_MARKER in str(e):
            return Result.success(None)
        return Result.failure(e)


async def get_post_by_id(post_id: str, *, client: Optional[GraphQLClient] = None) -> Optional[BlogPost]:
    """Single post by id, or None when missing, malformed or unreachable. Never raises."""
    return unwrap_post(await fetch_post_by_id(post_id, client=client), post_id)


__all__ = [
    "is_valid_uuid",
    "fetch_published_posts_page",
    "unwrap_listing",
    "unwrap_post",
    "list_published_posts",
    "fetch_post_by_id",
    "get_post_by_id",
]
