"""Unit tests for LinkPageSource."""

import pytest

from pagekit.fetch.core import MalformedPageError
from pagekit.fetch.models import HttpRequest, LinkCursor
from pagekit.fetch.runtime.paging import MISSING, PagedFetchEngine
from pagekit.fetch.sources import BearerToken, LinkPageSource

BASE = "https://api.example.com/odata/Orders"


@pytest.mark.asyncio
async def test_follows_odata_next_link(transport, executor):
    transport.queue({"value": [{"id": 1, "name": "a"}], "@odata.nextLink": f"{BASE}?$skip=1"})
    transport.queue({"value": [{"id": 2}]})
    source = LinkPageSource(
        executor,
        HttpRequest(url=BASE, params={"$top": 1}),
        records_path="value",
    )

    result = await PagedFetchEngine().fetch_all(source)

    assert result.fields == ("id", "name")
    assert result.rows == [{"id": 1, "name": "a"}, {"id": 2, "name": MISSING}]
    assert result.producer_calls == 3
    assert [r.url for r in transport.requests] == [BASE, f"{BASE}?$skip=1"]
    # The next link carries its own query string
    assert transport.requests[0].params == {"$top": 1}
    assert transport.requests[1].params == {}


@pytest.mark.asyncio
async def test_last_page_cursor_has_no_more(transport, executor):
    transport.queue({"value": []})
    source = LinkPageSource(executor, HttpRequest(url=BASE), records_path="value")

    page = await source(None)

    assert page.next_cursor == LinkCursor(next_url=None)
    assert await source(page.next_cursor) is None
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_relative_next_link_resolved(transport, executor):
    transport.queue({"items": [], "next": "/v1/items?page=2"}, url="https://api.example.com/v1/items")
    source = LinkPageSource(
        executor,
        HttpRequest(url="https://api.example.com/v1/items"),
        records_path="items",
        next_link_path="next",
    )

    page = await source(None)
    assert page.next_cursor.next_url == "https://api.example.com/v1/items?page=2"


@pytest.mark.asyncio
async def test_link_header(transport, executor):
    transport.queue(
        [{"id": 1}],
        headers={"link": '<https://api.example.com/items?page=2>; rel="next", <https://api.example.com/items?page=9>; rel="last"'},
    )
    transport.queue([{"id": 2}], headers={"Link": '<https://api.example.com/items?page=1>; rel="prev"'})
    source = LinkPageSource(executor, HttpRequest(url="https://api.example.com/items"), use_link_header=True)

    result = await PagedFetchEngine().fetch_all(source)

    assert result.column("id") == [1, 2]
    assert transport.requests[1].url == "https://api.example.com/items?page=2"


@pytest.mark.asyncio
async def test_credentials_attached_per_request(transport, executor):
    tokens = iter(["t1", "t2"])
    transport.queue({"value": [{"id": 1}], "@odata.nextLink": f"{BASE}?p=2"})
    transport.queue({"value": [{"id": 2}]})
    source = LinkPageSource(
        executor,
        HttpRequest(url=BASE, headers={"Accept": "application/json"}),
        records_path="value",
        credentials=BearerToken(lambda: next(tokens)),
    )

    await PagedFetchEngine().fetch_all(source)

    assert transport.requests[0].headers == {"Accept": "application/json", "Authorization": "Bearer t1"}
    assert transport.requests[1].headers["Authorization"] == "Bearer t2"


@pytest.mark.asyncio
async def test_max_pages(transport, executor):
    for n in range(3):
        transport.queue({"value": [{"id": n}], "@odata.nextLink": f"{BASE}?p={n + 1}"})
    source = LinkPageSource(executor, HttpRequest(url=BASE), records_path="value", max_pages=2)

    result = await PagedFetchEngine().fetch_all(source)

    assert result.pages_merged == 2
    assert len(transport.requests) == 2

    # A new fetch starts counting again
    transport.responses.clear()
    transport.queue({"value": [{"id": 9}]})
    again = await PagedFetchEngine().fetch_all(source)
    assert again.column("id") == [9]


def test_invalid_max_pages(executor):
    with pytest.raises(ValueError):
        LinkPageSource(executor, HttpRequest(url=BASE), max_pages=0)


class TestMalformedPages:
    @pytest.mark.asyncio
    async def test_non_json_body(self, transport, executor):
        transport.queue(raw=b"<html>oops</html>")
        source = LinkPageSource(executor, HttpRequest(url=BASE), records_path="value")

        with pytest.raises(MalformedPageError) as exc_info:
            await source(None)
        assert exc_info.value.response.body == b"<html>oops</html>"

    @pytest.mark.asyncio
    async def test_missing_records(self, transport, executor):
        transport.queue({"error": "nope"})
        source = LinkPageSource(executor, HttpRequest(url=BASE), records_path="value")

        with pytest.raises(MalformedPageError, match="No records"):
            await source(None)

    @pytest.mark.asyncio
    async def test_records_not_a_list(self, transport, executor):
        transport.queue({"value": {"id": 1}})
        source = LinkPageSource(executor, HttpRequest(url=BASE), records_path="value")

        with pytest.raises(MalformedPageError, match="Expected a list"):
            await source(None)

    @pytest.mark.asyncio
    async def test_records_not_objects(self, transport, executor):
        transport.queue({"value": [1, 2]})
        source = LinkPageSource(executor, HttpRequest(url=BASE), records_path="value")

        with pytest.raises(MalformedPageError, match="Record 0"):
            await source(None)

    @pytest.mark.asyncio
    async def test_malformed_page_not_retried(self, transport, executor):
        transport.queue(raw=b"not json")
        transport.queue({"value": []})
        source = LinkPageSource(executor, HttpRequest(url=BASE), records_path="value")

        with pytest.raises(MalformedPageError):
            await PagedFetchEngine().fetch_all(source)
        assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_unknown_charset_decodes_as_utf8(transport, executor):
    transport.queue(
        raw='{"value": [{"name": "café"}]}'.encode(),
        headers={"Content-Type": "application/json; charset=bogus"},
    )
    source = LinkPageSource(executor, HttpRequest(url=BASE), records_path="value")

    result = await PagedFetchEngine().fetch_all(source)
    assert result.column("name") == ["café"]
