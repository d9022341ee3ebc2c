"""
Pydantic schemas for blog posts and their list wrappers.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from app.config import POST_VALIDATION

class BlogPost(BaseModel):
    """A row of ``blog_posts`` as returned by the GraphQL endpoint."""
    id: str
    title: str
    body: str
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author_id: str

    model_config = ConfigDict(from_attributes=True)

class AuthorInfo(BaseModel):
    """Denormalized author display fields attached during enrichment."""
    name: str
    email: Optional[str] = None

class BlogPostWithAuthor(BlogPost):
    author: Optional[AuthorInfo] = None

class BlogPostEdge(BaseModel):
    node: BlogPost

class BlogPostWithAuthorEdge(BaseModel):
    node: BlogPostWithAuthor

class PageInfo(BaseModel):
    has_next_page: bool = Field(False, alias="hasNextPage")
    has_previous_page: bool = Field(False, alias="hasPreviousPage")
    start_cursor: Optional[str] = Field(None, alias="startCursor")
    end_cursor: Optional[str] = Field(None, alias="endCursor")

    model_config = ConfigDict(populate_by_name=True)

class BlogPostConnection(BaseModel):
    edges: List[BlogPostEdge] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def empty(cls) -> "BlogPostConnection":
        return cls(edges=[], page_info=PageInfo(has_next_page=False, has_previous_page=False))

    @property
    def posts(self) -> List[BlogPost]:
        return [edge.node for edge in self.edges]

class BlogPostListResponse(BaseModel):
    """Listing payload served by the API: a page of posts with author info."""
    edges: List[BlogPostWithAuthorEdge] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)

    model_config = ConfigDict(populate_by_name=True)

class PostCreate(BaseModel):
    """Title/body payload accepted by the create flow."""
    title: str = Field(
        min_length=POST_VALIDATION["title_min_length"],
        max_length=POST_VALIDATION["title_max_length"],
    )
    body: str = Field(
        min_length=POST_VALIDATION["body_min_length"],
        max_length=POST_VALIDATION["body_max_length"],
    )

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "title": "Shipping our first release",
            "body": "A short write-up of what went into the first release."
        }
    })
