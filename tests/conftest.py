"""Pytest configuration and fixtures."""

from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import pytest

import blogcms.retrieval.client as client_mod
from blogcms.config.loader import ClientConfig
from blogcms.retrieval.client import StrapiClient
from blogcms.services.content_manager import ContentManager

FIXED_NOW = "2026-10-17T12:00:00.000Z"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload: Any = None, reason: str = "OK"):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeTransport:
    """Records every call to requests.request and replays queued responses."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[Any] = []

    def queue(self, payload: Any = None, status_code: int = 200, reason: str = "OK") -> None:
        self.responses.append(FakeResponse(status_code, payload, reason))

    def fail_with(self, error: Exception) -> None:
        self.responses.append(error)

    def __call__(self, method, url, headers=None, **kwargs):
        self.calls.append({"method": method, "url": url, "headers": headers or {}, **kwargs})
        if not self.responses:
            return FakeResponse(200, {"data": [], "meta": {}})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last_query(self) -> str:
        return urlsplit(self.calls[-1]["url"]).query

    @property
    def last_path(self) -> str:
        return urlsplit(self.calls[-1]["url"]).path


@pytest.fixture
def transport(monkeypatch):
    """Patch requests.request inside the client module."""
    fake = FakeTransport()
    monkeypatch.setattr(client_mod.requests, "request", fake)
    return fake


@pytest.fixture
def config():
    return ClientConfig(base_url="https://cms.example.com", api_token="secret-token")


@pytest.fixture
def client(config):
    return StrapiClient(config)


@pytest.fixture
def manager(client):
    return ContentManager(client, clock=lambda: FIXED_NOW)


def make_post(post_id: int = 1, slug: str = "hello-world", **overrides) -> Dict[str, Any]:
    """Build a Strapi v5-style blog post payload."""
    post: Dict[str, Any] = {
        "id": post_id,
        "documentId": f"doc{post_id}",
        "title": f"Post {post_id}",
        "description": "A post about Astro",
        "content": "word " * 250,
        "slug": slug,
        "publishedDate": "2026-10-15T09:30:00.000Z",
        "publishedAt": "2026-10-15T09:30:00.000Z",
        "featured": False,
        "readingTime": None,
        "author": {"id": 7, "name": "Gabriel Ramos", "email": "gabriel@example.com", "bio": ""},
        "categories": [{"id": 3, "name": "Tech", "slug": "tech"}],
        "tags": [{"id": 4, "name": "astro", "slug": "astro"}],
        "heroImage": {
            "id": 9,
            "url": "https://cdn.example.com/hero.jpg",
            "formats": {
                "large": {"url": "https://cdn.example.com/large_hero.jpg", "width": 1000, "height": 600},
            },
        },
    }
    post.update(overrides)
    return post


def envelope(data: Any, pagination: Optional[Dict[str, int]] = None) -> Dict[str, Any]:
    meta: Dict[str, Any] = {}
    if pagination is not None:
        meta["pagination"] = pagination
    return {"data": data, "meta": meta}
