"""Cached query facade over the blog pipelines.

Reads go through the response cache (``blog-posts:<page>:<size>`` and
``blog-post:<id>``); only successful answers are stored, so a transient
failure is not served back for the staleness window. Creating a post writes
the new record under its detail key and invalidates every cached listing.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from app.config import MUTATION_SETTINGS, PAGINATION_SETTINGS
from app.cache.response_cache import ResponseCache, cache_key
from app.graphql.client import GraphQLClient, GraphQLRequestError, is_network_error
from app.integrations.accounts import AccountsStore
from app.models.schemas.accounts import AuthSession
from app.models.schemas.posts import (
    BlogPost,
    BlogPostConnection,
    BlogPostListResponse,
    BlogPostWithAuthor,
    BlogPostWithAuthorEdge,
)
from app.services.authors import enrich_posts_with_authors
from app.services.blog_posts import fetch_post_by_id, fetch_published_posts_page, unwrap_listing, unwrap_post
from app.services.post_mutations import create_post, validate_post_input
from app.utils import get_logger
from app.utils.backoff import exponential_backoff_seconds

logger = get_logger(__name__)

LIST_OPERATION = "blog-posts"
DETAIL_OPERATION = "blog-post"


def is_retryable_mutation_error(error: BaseException) -> bool:
    if isinstance(error, GraphQLRequestError):
        return error.status is not None and error.status >= 500
    return is_network_error(error)


class BlogQueryService:
    def __init__(
        self,
        cache: ResponseCache,
        *,
        client: Optional[GraphQLClient] = None,
        accounts_store: Optional[AccountsStore] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        self.cache = cache
        self.client = client
        self.accounts_store = accounts_store
        self._sleep = sleep or asyncio.sleep

    async def list_posts(self, page: int = 1, page_size: Optional[int] = None) -> BlogPostConnection:
        page_size = page_size or int(PAGINATION_SETTINGS["default_page_size"])
        key = cache_key(LIST_OPERATION, page, page_size)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Listing served from cache", key=key)
            return BlogPostConnection.model_validate(cached)

        result = await fetch_published_posts_page(page, page_size, client=self.client)
        connection = unwrap_listing(result, page, page_size)
        if not result.ok:
            return connection
        self.cache.set(key, connection.model_dump(mode="json", by_alias=True))
        return connection

    async def list_posts_with_authors(self, page: int = 1, page_size: Optional[int] = None) -> BlogPostListResponse:
        page_size = page_size or int(PAGINATION_SETTINGS["default_page_size"])
        connection = await self.list_posts(page, page_size)
        enriched = await enrich_posts_with_authors(connection.posts, store=self.accounts_store)
        return BlogPostListResponse(
            edges=[BlogPostWithAuthorEdge(node=post) for post in enriched],
            page_info=connection.page_info,
            page=page,
            page_size=page_size,
        )

    async def get_post(self, post_id: str) -> Optional[BlogPost]:
        key = cache_key(DETAIL_OPERATION, post_id)
        cached = self.cache.get(key)
        if cached is not None:
            return BlogPost.model_validate(cached)

        post = unwrap_post(await fetch_post_by_id(post_id, client=self.client), post_id)
        if post is not None:
            self.cache.set(key, post.model_dump(mode="json"))
        return post

    async def get_post_with_author(self, post_id: str) -> Optional[BlogPostWithAuthor]:
        post = await self.get_post(post_id)
        if post is None:
            return None
        enriched = await enrich_posts_with_authors([post], store=self.accounts_store)
        return enriched[0]

    async def create_post(self, title: str, body: str, session: Optional[AuthSession]) -> BlogPost:
        """Validate, then create a post, retrying the whole mutation on server/network failure."""
        payload = validate_post_input(title, body)
        retries = int(MUTATION_SETTINGS["retries"])
        attempt = 0
        while True:
            try:
                post = await create_post(payload.title, payload.body, session, client=self.client)
                break
            except Exception as e:
                if attempt < retries and is_retryable_mutation_error(e):
                    delay = exponential_backoff_seconds(attempt)
                    logger.warning("Blog post creation retry scheduled", attempt=attempt + 1, backoff_seconds=delay, error=str(e))
                    attempt += 1
                    await self._sleep(delay)
                    continue
                logger.error("Error creating blog post", error=str(e), error_type=type(e).__name__)
                raise

        self.cache.set(cache_key(DETAIL_OPERATION, post.id), post.model_dump(mode="json"))
        removed = self.cache.invalidate_prefix(LIST_OPERATION)
        logger.info("Blog post created", post_id=post.id, invalidated_listings=removed)
        return post


__all__ = ["BlogQueryService", "LIST_OPERATION", "DETAIL_OPERATION", "is_retryable_mutation_error"]
