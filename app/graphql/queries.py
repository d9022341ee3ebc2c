"""
GraphQL query documents for blog posts.
"""

POST_FIELDS = """
          id
          title
          body
          published_at
          created_at
          updated_at
          author_id
"""

# Published posts ordered by published_at descending. Callers pass
# ``first``, ``filter`` and ``orderBy`` variables.
GET_BLOG_POSTS = f"""
  query GetBlogPosts($first: Int, $after: String, $filter: blog_postsFilter, $orderBy: [blog_postsOrderBy!]) {{
    blog_postsCollection(
      first: $first
      after: $after
      filter: $filter
      orderBy: $orderBy
    ) {{
      edges {{
        node {{{POST_FIELDS}        }}
      }}
      pageInfo {{
        hasNextPage
        hasPreviousPage
        startCursor
        endCursor
      }}
    }}
  }}
"""

GET_BLOG_POST_BY_ID = f"""
  query GetBlogPostById($id: UUID!) {{
    blog_postsCollection(filter: {{ id: {{ eq: $id }} }}) {{
      edges {{
        node {{{POST_FIELDS}        }}
      }}
    }}
  }}
"""


def published_posts_variables(first: int) -> dict:
    """Variables selecting ``first`` published posts, newest first, nulls last."""
    return {
        "first": first,
        "filter": {
            "published_at": {
                "is": "NOT_NULL",
            },
        },
        "orderBy": [
            {
                "published_at": "DescNullsLast",
            },
        ],
    }


__all__ = ["GET_BLOG_POSTS", "GET_BLOG_POST_BY_ID", "published_posts_variables"]
