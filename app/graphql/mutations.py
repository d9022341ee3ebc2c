"""
GraphQL mutation documents for blog posts.

Only CREATE_BLOG_POST has a calling pipeline; update and delete are part of
the query layer for completeness of the ``blog_posts`` surface.
"""
from app.graphql.queries import POST_FIELDS

CREATE_BLOG_POST = f"""
  mutation CreateBlogPost($title: String!, $body: String!, $author_id: UUID!, $published_at: Datetime) {{
    insertIntoblog_postsCollection(
      objects: {{
        title: $title
        body: $body
        author_id: $author_id
        published_at: $published_at
      }}
    ) {{
      records {{{POST_FIELDS}      }}
    }}
  }}
"""

UPDATE_BLOG_POST = f"""
  mutation UpdateBlogPost($id: UUID!, $title: String, $body: String, $published_at: Datetime) {{
    updateblog_postsCollection(
      filter: {{ id: {{ eq: $id }} }}
      set: {{
        title: $title
        body: $body
        published_at: $published_at
      }}
    ) {{
      records {{{POST_FIELDS}      }}
    }}
  }}
"""

DELETE_BLOG_POST = """
  mutation DeleteBlogPost($id: UUID!) {
    deleteFromblog_postsCollection(filter: { id: { eq: $id } }) {
      records {
        id
      }
    }
  }
"""

__all__ = ["CREATE_BLOG_POST", "UPDATE_BLOG_POST", "DELETE_BLOG_POST"]
