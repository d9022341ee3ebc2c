"""
GraphQL package: transport client and query/mutation documents.
"""
from .client import GraphQLClient, GraphQLRequestError, create_graphql_client
from .queries import GET_BLOG_POSTS, GET_BLOG_POST_BY_ID, published_posts_variables
from .mutations import CREATE_BLOG_POST, UPDATE_BLOG_POST, DELETE_BLOG_POST

__all__ = [
    "GraphQLClient",
    "GraphQLRequestError",
    "create_graphql_client",
    "GET_BLOG_POSTS",
    "GET_BLOG_POST_BY_ID",
    "published_posts_variables",
    "CREATE_BLOG_POST",
    "UPDATE_BLOG_POST",
    "DELETE_BLOG_POST",
]
