from .base import GraphQLErrorEntry, GraphQLErrorLocation, GraphQLResponse, ErrorResponse
from .posts import (
    BlogPost,
    AuthorInfo,
    BlogPostWithAuthor,
    BlogPostEdge,
    BlogPostWithAuthorEdge,
    PageInfo,
    BlogPostConnection,
    BlogPostListResponse,
    PostCreate,
)
from .accounts import Account, CurrentUser, AuthSession

__all__ = [
    # Base
    "GraphQLErrorEntry",
    "GraphQLErrorLocation",
    "GraphQLResponse",
    "ErrorResponse",

    # Posts
    "BlogPost",
    "AuthorInfo",
    "BlogPostWithAuthor",
    "BlogPostEdge",
    "BlogPostWithAuthorEdge",
    "PageInfo",
    "BlogPostConnection",
    "BlogPostListResponse",
    "PostCreate",

    # Accounts / auth
    "Account",
    "CurrentUser",
    "AuthSession",
]
