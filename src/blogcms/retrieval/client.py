"""HTTP client for the Strapi content API."""

import math
import re
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urlsplit

import requests

from ..config.loader import ClientConfig
from ..errors import TransportError
from ..models.content import Author, BlogPost, Category, StrapiImage, StrapiResponse, Tag
from ..utils.logging import get_logger
from ..utils.time import format_long_date
from .query import PostsQuery, build_query_params, encode_query

logger = get_logger(__name__)

WORDS_PER_MINUTE = 200
DEFAULT_POPULATE = ("author", "categories", "tags", "heroImage")
DEFAULT_SORT = "publishedDate:desc"
DEFAULT_PAGE_SIZE = 10

_WHITESPACE_RE = re.compile(r"\s+")


class StrapiClient:
    """
    Thin typed wrapper over the Strapi REST API.

    Holds only immutable configuration; every call owns its own
    request/response, so one instance can be shared freely.
    """

    def __init__(self, config: ClientConfig):
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.api_token = config.api_token
        self.timeout = config.timeout_seconds

    def _build_headers(self, headers: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Default headers merged with caller headers. Caller headers win on conflict."""
        merged = {"Content-Type": "application/json"}
        if self.api_token:
            merged["Authorization"] = f"Bearer {self.api_token}"
        if headers:
            merged.update(headers)
        return merged

    def request(
        self,
        endpoint: str,
        method: str = "GET",
        headers: Optional[Mapping[str, str]] = None,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """
        Issue one HTTP call and return the decoded JSON body.

        Args:
            endpoint: Path plus query string, e.g. "/api/tags?sort=name:asc"
            method: HTTP verb
            headers: Extra headers, overriding the defaults
            **kwargs: Passed through to requests (json=, data=, ...)

        Raises:
            TransportError: On non-2xx status, connection failure or invalid JSON
        """
        url = f"{self.base_url}{endpoint}"
        kwargs.setdefault("timeout", self.timeout)
        logger.debug(f"{method} {url}")

        try:
            response = requests.request(method, url, headers=self._build_headers(headers), **kwargs)
        except requests.RequestException as e:
            logger.warning(f"Request to {url} failed: {e}")
            raise TransportError(None, str(e), url=url) from e

        if not 200 <= response.status_code < 300:
            logger.warning(f"Request to {url} returned {response.status_code} {response.reason}")
            raise TransportError(response.status_code, response.reason or "", url=url)

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(response.status_code, f"Invalid JSON body: {e}", url=url) from e

    def _get(self, path: str, query: PostsQuery, data_type: Any) -> StrapiResponse:
        query_string = encode_query(build_query_params(query))
        endpoint = f"{path}?{query_string}" if query_string else path
        payload = self.request(endpoint)
        if isinstance(payload, dict) and payload.get("data") is None:
            payload = {**payload, "data": []}
        return StrapiResponse[data_type].model_validate(payload)

    def get_blog_posts(self, query: Optional[PostsQuery] = None) -> StrapiResponse[Tuple[BlogPost, ...]]:
        """
        Fetch blog posts with pagination and filters.

        Unset fields on ``query`` fall back to page 1, 10 per page, newest
        first, with author/categories/tags/heroImage expanded.
        """
        query = query or PostsQuery()
        query = query.model_copy(
            update={
                "page": query.page or 1,
                "page_size": query.page_size or DEFAULT_PAGE_SIZE,
                "sort": query.sort or DEFAULT_SORT,
                "populate": query.populate or DEFAULT_POPULATE,
            }
        )
        return self._get("/api/blog-posts", query, Tuple[BlogPost, ...])

    def get_blog_post_by_slug(self, slug: str) -> StrapiResponse[Tuple[BlogPost, ...]]:
        query = PostsQuery(filters={"slug": {"$eq": slug}}, populate=DEFAULT_POPULATE)
        return self._get("/api/blog-posts", query, Tuple[BlogPost, ...])

    def get_categories(self) -> StrapiResponse[Tuple[Category, ...]]:
        return self._get("/api/categories", PostsQuery(sort="name:asc"), Tuple[Category, ...])

    def get_posts_by_category(
        self,
        category_id: int,
        query: Optional[PostsQuery] = None,
    ) -> StrapiResponse[Tuple[BlogPost, ...]]:
        query = (query or PostsQuery()).with_filters(categories={"id": {"$eq": category_id}})
        return self.get_blog_posts(query)

    def get_related_posts(self, current_post_id: int, limit: int = 3) -> StrapiResponse[Tuple[BlogPost, ...]]:
        """Latest posts excluding ``current_post_id``, capped at ``limit``."""
        query = PostsQuery(page_size=limit, filters={"id": {"$ne": current_post_id}})
        return self.get_blog_posts(query)

    def search_posts(self, query: str, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> StrapiResponse[Tuple[BlogPost, ...]]:
        """Case-insensitive substring search across title and description."""
        search = PostsQuery(
            page=page,
            page_size=page_size,
            populate=DEFAULT_POPULATE,
            filters={
                "$or": [
                    {"title": {"$containsi": query}},
                    {"description": {"$containsi": query}},
                ]
            },
        )
        return self._get("/api/blog-posts", search, Tuple[BlogPost, ...])

    def get_authors(self) -> StrapiResponse[Tuple[Author, ...]]:
        query = PostsQuery(sort="name:asc", populate=("avatar",))
        return self._get("/api/authors", query, Tuple[Author, ...])

    def get_tags(self) -> StrapiResponse[Tuple[Tag, ...]]:
        return self._get("/api/tags", PostsQuery(sort="name:asc"), Tuple[Tag, ...])

    @staticmethod
    def _is_relative(url: str) -> bool:
        try:
            parts = urlsplit(url)
        except ValueError:
            return False
        return not parts.scheme and not parts.netloc

    def _absolute(self, url: str) -> str:
        if self._is_relative(url):
            return f"{self.base_url}/{url.lstrip('/')}"
        return url

    def get_optimized_image_url(self, image: Optional[StrapiImage], format_name: str = "medium") -> str:
        """
        Resolve a display URL for an image. Never raises.

        Relative uploads are served from the CMS host directly. Otherwise
        the requested format variant is preferred, then the original URL.
        Returns "" when the image or its URL is missing.
        """
        if image is None or not image.url:
            return ""
        if self._is_relative(image.url):
            return self._absolute(image.url)
        variant = image.formats.get(format_name)
        if variant is not None and variant.url:
            return self._absolute(variant.url)
        return self._absolute(image.url)

    @staticmethod
    def calculate_reading_time(content: Optional[str]) -> int:
        """Minutes to read ``content`` at 200 words per minute, rounded up. Empty content is 0."""
        words = [w for w in _WHITESPACE_RE.split((content or "").strip()) if w]
        return math.ceil(len(words) / WORDS_PER_MINUTE)

    @staticmethod
    def format_date(date_string: Optional[str]) -> str:
        return format_long_date(date_string or "")
