"""Unit tests for GraphQLPageSource."""

import pytest

from pagekit.fetch.core import MalformedPageError
from pagekit.fetch.runtime.paging import PagedFetchEngine
from pagekit.fetch.sources import GraphQLPageSource

URL = "https://api.example.com/graphql"
QUERY = "query($first: Int!, $after: String) { issues(first: $first, after: $after) { ... } }"


def connection(nodes, has_next, end_cursor=None, use_edges=False):
    conn = {"pageInfo": {"hasNextPage": has_next, "endCursor": end_cursor}}
    if use_edges:
        conn["edges"] = [{"node": node, "cursor": "c"} for node in nodes]
    else:
        conn["nodes"] = nodes
    return {"data": {"repository": {"issues": conn}}}


@pytest.mark.asyncio
async def test_walks_end_cursor(transport, executor):
    transport.queue(connection([{"number": 1}, {"number": 2}], True, "Y3Vyc29yOjI="))
    transport.queue(connection([{"number": 3}], False, "Y3Vyc29yOjM="))
    source = GraphQLPageSource(
        executor,
        URL,
        QUERY,
        connection_path="data.repository.issues",
        variables={"owner": "o"},
        page_size=2,
    )

    result = await PagedFetchEngine().fetch_all(source)

    assert result.column("number") == [1, 2, 3]
    assert [r.method for r in transport.requests] == ["POST", "POST"]
    assert transport.requests[0].json_body == {
        "query": QUERY,
        "variables": {"owner": "o", "first": 2, "after": None},
    }
    assert transport.requests[1].json_body["variables"]["after"] == "Y3Vyc29yOjI="


@pytest.mark.asyncio
async def test_edges_layout(transport, executor):
    transport.queue(connection([{"id": "a"}, {"id": "b"}], False, use_edges=True))
    source = GraphQLPageSource(executor, URL, QUERY, connection_path="data.repository.issues")

    result = await PagedFetchEngine().fetch_all(source)
    assert result.column("id") == ["a", "b"]


@pytest.mark.asyncio
async def test_errors_array_raises(transport, executor):
    transport.queue({"data": None, "errors": [{"message": "Field 'x' doesn't exist"}]})
    source = GraphQLPageSource(executor, URL, QUERY, connection_path="data.repository.issues")

    with pytest.raises(MalformedPageError, match="doesn't exist"):
        await source(None)


@pytest.mark.asyncio
async def test_missing_connection_raises(transport, executor):
    transport.queue({"data": {"repository": None}})
    source = GraphQLPageSource(executor, URL, QUERY, connection_path="data.repository.issues")

    with pytest.raises(MalformedPageError, match="No connection object"):
        await source(None)


@pytest.mark.asyncio
@pytest.mark.parametrize("end_cursor", [None, ""])
async def test_has_next_page_without_end_cursor_raises(transport, executor, end_cursor):
    """A page promising more data without a cursor must not end the fetch quietly."""
    transport.queue(connection([{"id": 1}], True, end_cursor))
    source = GraphQLPageSource(executor, URL, QUERY, connection_path="data.repository.issues")

    with pytest.raises(MalformedPageError, match="endCursor"):
        await PagedFetchEngine().fetch_all(source)
    assert len(transport.requests) == 1
