import asyncio
import uuid

import pytest

from app.graphql.client import GraphQLRequestError
from app.graphql.queries import GET_BLOG_POST_BY_ID, GET_BLOG_POSTS
from app.services import blog_posts
from app.services.blog_posts import get_post_by_id, is_valid_uuid, list_published_posts
from conftest import FakeBlogBackend


def test_seven_posts_two_pages(post_factory):
    backend = FakeBlogBackend(post_factory(7))

    first = asyncio.run(list_published_posts(1, 5, client=backend))
    assert len(first.edges) == 5
    assert first.page_info.has_next_page is True
    assert first.page_info.has_previous_page is False

    second = asyncio.run(list_published_posts(2, 5, client=backend))
    assert len(second.edges) == 2
    assert second.page_info.has_next_page is False
    assert second.page_info.has_previous_page is True

    assert [e.node.title for e in second.edges] == ["Post 5", "Post 6"]


def test_listing_requests_published_posts_newest_first(post_factory):
    backend = FakeBlogBackend(post_factory(3))

    asyncio.run(list_published_posts(2, 4, client=backend))

    call = backend.calls[0]
    assert call["query"] == GET_BLOG_POSTS
    assert call["variables"] == {
        "first": 9,
        "filter": {"published_at": {"is": "NOT_NULL"}},
        "orderBy": [{"published_at": "DescNullsLast"}],
    }


def test_no_published_posts_returns_empty_page():
    backend = FakeBlogBackend([])

    result = asyncio.run(list_published_posts(1, 5, client=backend))

    assert result.edges == []
    assert result.page_info.has_next_page is False
    assert result.page_info.has_previous_page is False


def test_default_page_size_is_five(post_factory):
    backend = FakeBlogBackend(post_factory(12))

    result = asyncio.run(list_published_posts(client=backend))

    assert len(result.edges) == 5
    assert backend.calls[0]["variables"]["first"] == 6


def test_listing_failure_is_swallowed():
    backend = FakeBlogBackend(fail_with=GraphQLRequestError("GraphQL errors: denied"))

    result = asyncio.run(list_published_posts(3, 5, client=backend))

    assert result.edges == []
    assert result.page_info.has_next_page is False
    assert result.page_info.has_previous_page is False


def test_listing_without_configuration_is_swallowed(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL")

    result = asyncio.run(list_published_posts(1, 5))

    assert result.edges == []


def test_missing_data_field_is_swallowed():
    class NoDataBackend(FakeBlogBackend):
        async def request(self, query, variables=None, headers=None, retries=None):
            from app.models.schemas.base import GraphQLResponse
            return GraphQLResponse(data=None)

    result = asyncio.run(list_published_posts(1, 5, client=NoDataBackend()))
    assert result.edges == []


def test_pages_beyond_fifty_records_appear_empty(post_factory):
    backend = FakeBlogBackend(post_factory(60))

    page_ten = asyncio.run(list_published_posts(10, 5, client=backend))
    assert len(page_ten.edges) == 5
    assert page_ten.page_info.has_next_page is False

    page_eleven = asyncio.run(list_published_posts(11, 5, client=backend))
    assert page_eleven.edges == []
    assert page_eleven.page_info.has_next_page is False
    assert page_eleven.page_info.has_previous_page is True
    assert backend.calls[-1]["variables"]["first"] == 50


def test_uuid_validation():
    assert is_valid_uuid(str(uuid.uuid4()))
    assert is_valid_uuid(str(uuid.uuid4()).upper())
    assert not is_valid_uuid("not-a-uuid")
    assert not is_valid_uuid("")
    assert not is_valid_uuid("12345678-1234-1234-1234-1234567890123")


def test_invalid_id_returns_none_without_network_call():
    backend = FakeBlogBackend([])

    assert asyncio.run(get_post_by_id("not-a-uuid", client=backend)) is None
    assert backend.calls == []


def test_invalid_id_never_builds_a_client(monkeypatch):
    def _explode():
        raise AssertionError("client must not be created")

    monkeypatch.setattr(blog_posts, "create_graphql_client", _explode)
    assert asyncio.run(get_post_by_id("invalid-id-12345")) is None


def test_lookup_returns_matching_post(post_factory):
    posts = post_factory(3)
    backend = FakeBlogBackend(posts)

    post = asyncio.run(get_post_by_id(posts[1]["id"], client=backend))

    assert post is not None
    assert post.id == posts[1]["id"]
    assert post.title == "Post 1"
    assert backend.calls[0]["query"] == GET_BLOG_POST_BY_ID
    assert backend.calls[0]["variables"] == {"id": posts[1]["id"]}


def test_lookup_of_unknown_id_returns_none(post_factory):
    backend = FakeBlogBackend(post_factory(2))
    assert asyncio.run(get_post_by_id(str(uuid.uuid4()), client=backend)) is None


@pytest.mark.parametrize("error", [
    GraphQLRequestError('GraphQL errors: invalid input syntax for type uuid: "abc"'),
    GraphQLRequestError("GraphQL request failed: Internal Server Error", status=500),
    ConnectionError("network down"),
])
def test_lookup_failures_return_none(error):
    backend = FakeBlogBackend(fail_with=error)
    assert asyncio.run(get_post_by_id(str(uuid.uuid4()), client=backend)) is None
