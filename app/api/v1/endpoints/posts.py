"""
Blog post endpoints: paginated listing, detail and creation.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Request
import time
from app.api.deps import get_auth_session, get_blog_query_service
from app.config import PAGINATION_SETTINGS
from app.graphql.client import GraphQLRequestError, is_network_error
from app.models.schemas.accounts import AuthSession
from app.models.schemas.posts import BlogPost, BlogPostListResponse, BlogPostWithAuthor, PostCreate
from app.services.blog_queries import BlogQueryService
from app.services.post_mutations import AuthenticationError, PostCreationError, PostValidationError
from app.utils import get_logger, log_performance

router = APIRouter()
logger = get_logger(__name__)

def _positive_int(raw: Optional[str], default: int) -> int:
    """Lenient query-string parsing: anything that is not a positive integer becomes ``default``."""
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value >= 1 else default

@router.get("", response_model=BlogPostListResponse, include_in_schema=False)
@router.get(
    "/",
    response_model=BlogPostListResponse,
    summary="List published posts"
)
async def list_posts(
    request: Request,
    page: Optional[str] = None,
    page_size: Optional[str] = None,
    service: BlogQueryService = Depends(get_blog_query_service)
) -> BlogPostListResponse:
    """Page of published posts, newest first, with author name/email where visible."""
    start_time = time.time()
    request_id = getattr(request.state, "request_id", "unknown")
    current_page = _positive_int(page, 1)
    size = _positive_int(page_size, int(PAGINATION_SETTINGS["default_page_size"]))

    result = await service.list_posts_with_authors(current_page, size)

    duration_ms = (time.time() - start_time) * 1000
    log_performance(
        operation="list_posts_endpoint",
        duration_ms=duration_ms,
        additional_data={"page": current_page, "page_size": size, "returned": len(result.edges)}
    )
    logger.info(
        "Blog posts listed",
        page=current_page,
        page_size=size,
        returned=len(result.edges),
        request_id=request_id
    )
    return result

@router.get(
    "/{post_id}",
    response_model=BlogPostWithAuthor,
    summary="Get a post by id"
)
async def get_post(
    post_id: str,
    request: Request,
    service: BlogQueryService = Depends(get_blog_query_service)
) -> BlogPostWithAuthor:
    request_id = getattr(request.state, "request_id", "unknown")
    post = await service.get_post_with_author(post_id)
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    logger.info("Blog post retrieved", post_id=post_id, request_id=request_id)
    return post

@router.post("", response_model=BlogPost, status_code=status.HTTP_201_CREATED, include_in_schema=False)
@router.post(
    "/",
    response_model=BlogPost,
    status_code=status.HTTP_201_CREATED,
    summary="Create and publish a post"
)
async def create_post(
    payload: PostCreate,
    request: Request,
    session: AuthSession = Depends(get_auth_session),
    service: BlogQueryService = Depends(get_blog_query_service)
) -> BlogPost:
    """Create a post authored by the authenticated caller; it is published immediately."""
    request_id = getattr(request.state, "request_id", "unknown")

    try:
        post = await service.create_post(payload.title, payload.body, session)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    except PostValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )
    except (GraphQLRequestError, PostCreationError) as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )
    except Exception as e:
        if not is_network_error(e):
            raise
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e) or "Network error while creating the post"
        )

    logger.info(
        "Blog post created via API",
        post_id=post.id,
        user_id=session.user.id if session.user else None,
        request_id=request_id
    )
    return post
