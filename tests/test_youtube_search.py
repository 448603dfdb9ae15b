"""Tests for the YouTube search fallback provider."""

from __future__ import annotations

import json

import httpx
import pytest

from app.config import Settings
from app.errors import TransientProviderError
from app.services.youtube import YouTubeSearchClient


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


def results_page(*videos: tuple[str, str]) -> str:
    contents = [
        {"videoRenderer": {"videoId": video_id, "title": {"runs": [{"text": title}]}}}
        for video_id, title in videos
    ]
    # Ads and shelves share the same list in real pages.
    contents.insert(0, {"adSlotRenderer": {"id": "ignored"}})
    data = {
        "contents": {
            "twoColumnSearchResultsRenderer": {
                "primaryContents": {
                    "sectionListRenderer": {
                        "contents": [{"itemSectionRenderer": {"contents": contents}}]
                    }
                }
            }
        }
    }
    return (
        "<html><body><script>var ytInitialData = "
        + json.dumps(data)
        + ";</script></body></html>"
    )


def test_parse_results_page_reads_initial_data() -> None:
    html = results_page(
        ("PLl99DlL6b4", "Dune: Part Two | Official Trailer 3"),
        ("PLl99DlL6b4", "Dune: Part Two | Official Trailer 3"),
        ("U2Qp5pL3ovA", "Dune Part Two reaction"),
    )

    candidates = YouTubeSearchClient.parse_results_page(html)

    assert [candidate.key for candidate in candidates] == ["PLl99DlL6b4", "U2Qp5pL3ovA"]
    assert candidates[0].name == "Dune: Part Two | Official Trailer 3"
    assert candidates[0].url == "https://www.youtube.com/watch?v=PLl99DlL6b4"
    assert candidates[0].language is None


def test_parse_results_page_falls_back_to_watch_links() -> None:
    html = '<a href="/watch?v=dQw4w9WgXcQ">x</a><a href="/watch?v=9bZkp7q19f0">y</a>'

    candidates = YouTubeSearchClient.parse_results_page(html)

    assert [candidate.key for candidate in candidates] == ["dQw4w9WgXcQ", "9bZkp7q19f0"]
    assert all(candidate.name == "" for candidate in candidates)


@pytest.mark.anyio("asyncio")
async def test_search_trailers_sends_query() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text=results_page(("PLl99DlL6b4", "Dune trailer")))

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url="https://yt.example.com") as http_client:
        client = YouTubeSearchClient(Settings(_env_file=None), http_client)
        candidates = await client.search_trailers("Dune season 1 trailer")

    assert [candidate.key for candidate in candidates] == ["PLl99DlL6b4"]
    assert requests[0].url.path == "/results"
    assert requests[0].url.params["search_query"] == "Dune season 1 trailer"


@pytest.mark.anyio("asyncio")
async def test_blank_query_makes_no_request() -> None:
    def handler(_: httpx.Request) -> httpx.Response:  # pragma: no cover - must not run
        raise AssertionError("unexpected request")

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url="https://yt.example.com") as http_client:
        client = YouTubeSearchClient(Settings(_env_file=None), http_client)
        assert await client.search_trailers("   ") == []


@pytest.mark.anyio("asyncio")
async def test_rate_limit_is_transient() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(429, text="slow down")

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url="https://yt.example.com") as http_client:
        client = YouTubeSearchClient(Settings(_env_file=None), http_client)
        with pytest.raises(TransientProviderError):
            await client.search_trailers("Dune trailer")
