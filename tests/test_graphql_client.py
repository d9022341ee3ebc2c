import asyncio

import aiohttp
import pytest

from app.config import ConfigurationError
from app.graphql.client import GraphQLClient, GraphQLRequestError, create_graphql_client
from conftest import ANON_KEY, SUPABASE_URL, FakeResponse, FakeSession, SleepRecorder

QUERY = "query { ping }"


def _client(outcomes):
    session = FakeSession(outcomes)
    sleep = SleepRecorder()
    return GraphQLClient(session=session, sleep=sleep), session, sleep


def test_retries_server_errors_with_linear_backoff():
    client, session, sleep = _client([
        FakeResponse(500, {"message": "upstream down"}, reason="Internal Server Error"),
        FakeResponse(503, text="", reason="Service Unavailable"),
        FakeResponse(200, {"data": {"ping": "pong"}}),
    ])

    response = asyncio.run(client.request(QUERY))

    assert response.data == {"ping": "pong"}
    assert len(session.calls) == 3
    assert sleep.delays == [1.0, 2.0]


def test_server_error_on_final_attempt_raises_body_message():
    client, session, sleep = _client([
        FakeResponse(500, {"message": "boom"}),
        FakeResponse(500, {"message": "boom"}),
        FakeResponse(500, {"error": "still broken"}),
    ])

    with pytest.raises(GraphQLRequestError) as excinfo:
        asyncio.run(client.request(QUERY))

    assert str(excinfo.value) == "still broken"
    assert excinfo.value.status == 500
    assert len(session.calls) == 3


def test_client_error_is_not_retried():
    client, session, sleep = _client([
        FakeResponse(400, {"message": "bad query"}, reason="Bad Request"),
    ])

    with pytest.raises(GraphQLRequestError, match="bad query"):
        asyncio.run(client.request(QUERY))

    assert len(session.calls) == 1
    assert sleep.delays == []


def test_http_error_message_falls_back_to_text_then_status():
    client, _, _ = _client([FakeResponse(401, text="plain failure", reason="Unauthorized")])
    with pytest.raises(GraphQLRequestError, match="^plain failure$"):
        asyncio.run(client.request(QUERY))

    client, _, _ = _client([FakeResponse(404, text="", reason="Not Found")])
    with pytest.raises(GraphQLRequestError, match="GraphQL request failed: Not Found"):
        asyncio.run(client.request(QUERY))


def test_graphql_errors_are_joined_and_not_retried():
    client, session, _ = _client([
        FakeResponse(200, {
            "data": None,
            "errors": [
                {"message": "first problem", "path": ["blog_postsCollection", "edges", 0]},
                {"message": "second problem"},
            ],
        }),
    ])

    with pytest.raises(GraphQLRequestError) as excinfo:
        asyncio.run(client.request(QUERY))

    assert str(excinfo.value) == (
        "GraphQL errors: first problem at blog_postsCollection.edges.0, second problem"
    )
    assert len(excinfo.value.errors) == 2
    assert len(session.calls) == 1


def test_network_errors_are_retried_then_last_error_raised():
    client, session, sleep = _client([
        aiohttp.ClientConnectionError("connection reset"),
        aiohttp.ClientConnectionError("connection refused"),
        aiohttp.ClientConnectionError("network unreachable"),
    ])

    with pytest.raises(aiohttp.ClientConnectionError, match="network unreachable"):
        asyncio.run(client.request(QUERY))

    assert len(session.calls) == 3
    assert sleep.delays == [1.0, 2.0]


def test_network_error_then_success():
    client, session, sleep = _client([
        RuntimeError("failed to fetch"),
        FakeResponse(200, {"data": {"ping": "pong"}}),
    ])

    response = asyncio.run(client.request(QUERY))

    assert response.data == {"ping": "pong"}
    assert sleep.delays == [1.0]


def test_unrelated_exception_is_not_retried():
    client, session, _ = _client([KeyError("oops")])

    with pytest.raises(KeyError):
        asyncio.run(client.request(QUERY))

    assert len(session.calls) == 1


def test_request_payload_and_default_headers():
    client, session, _ = _client([FakeResponse(200, {"data": {}})])

    asyncio.run(client.request(QUERY, {"first": 3}))

    call = session.calls[0]
    assert call["url"] == f"{SUPABASE_URL}/graphql/v1"
    assert call["json"] == {"query": QUERY, "variables": {"first": 3}}
    assert call["headers"]["apikey"] == ANON_KEY
    assert call["headers"]["Authorization"] == f"Bearer {ANON_KEY}"
    assert call["headers"]["Content-Type"] == "application/json"


def test_authenticated_request_overrides_bearer():
    client, session, _ = _client([FakeResponse(200, {"data": {}})])

    asyncio.run(client.authenticated_request(QUERY, "user-token", {"a": 1}))

    headers = session.calls[0]["headers"]
    assert headers["Authorization"] == "Bearer user-token"
    assert headers["apikey"] == ANON_KEY


def test_retry_budget_can_be_zero():
    client, session, sleep = _client([FakeResponse(502, {"message": "bad gateway"})])

    with pytest.raises(GraphQLRequestError, match="bad gateway"):
        asyncio.run(client.request(QUERY, retries=0))

    assert len(session.calls) == 1
    assert sleep.delays == []


def test_missing_configuration_fails_construction(monkeypatch):
    monkeypatch.delenv("SUPABASE_ANON_KEY")
    with pytest.raises(ConfigurationError):
        create_graphql_client()

    monkeypatch.setenv("SUPABASE_ANON_KEY", ANON_KEY)
    monkeypatch.setenv("SUPABASE_URL", "   ")
    with pytest.raises(ConfigurationError):
        create_graphql_client()
