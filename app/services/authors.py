"""Author enrichment: attach author name/email to posts after the primary fetch.

One batched accounts lookup per call, keyed by the distinct author ids of the
batch. Posts whose author is not visible keep ``author=None``; a failed lookup
returns every post without author info. Never raises.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from app.integrations.accounts import AccountsStore, create_accounts_store
from app.models.schemas.accounts import Account
from app.models.schemas.posts import AuthorInfo, BlogPost, BlogPostWithAuthor
from app.utils import Result, get_logger

logger = get_logger(__name__)


def _without_authors(posts: Sequence[BlogPost]) -> List[BlogPostWithAuthor]:
    return [BlogPostWithAuthor(**post.model_dump(exclude={"author"})) for post in posts]


async def fetch_authors(author_ids: List[str], *, store: Optional[AccountsStore] = None) -> Result[Dict[str, Account]]:
    try:
        store = store or create_accounts_store()
        accounts = await store.fetch_accounts(author_ids)
    except Exception as e:
        return Result.failure(e)
    return Result.success({account.id: account for account in accounts})


async def enrich_posts_with_authors(
    posts: Sequence[BlogPost],
    *,
    store: Optional[AccountsStore] = None,
) -> List[BlogPostWithAuthor]:
    if not posts:
        return []

    author_ids = list(dict.fromkeys(post.author_id for post in posts))
    result = await fetch_authors(author_ids, store=store)
    if not result.ok:
        logger.error(
            "Error fetching authors",
            error=str(result.error),
            error_type=type(result.error).__name__,
            author_ids=author_ids,
        )
        return _without_authors(posts)

    author_map = result.unwrap_or({})
    missing_ids = [author_id for author_id in author_ids if author_id not in author_map]
    if missing_ids:
        logger.warning(
            "Some author accounts not found",
            missing_ids=missing_ids,
            requested=len(author_ids),
        )

    enriched: List[BlogPostWithAuthor] = []
    for post in posts:
        account = author_map.get(post.author_id)
        author = AuthorInfo(name=account.name, email=account.email) if account else None
        enriched.append(BlogPostWithAuthor(**post.model_dump(exclude={"author"}), author=author))
    return enriched


__all__ = ["fetch_authors", "enrich_posts_with_authors"]
