"""High-level content operations for blog pages.

Operations fall into two groups:

* critical (home page, post by slug, category listing, search) raise
  ContentLoadError / NotFoundError so the page can render an error state
* non-critical (related, featured, recent, categories, authors, tags) return
  an Outcome; on failure the cause is logged and an empty tuple is returned
"""

from pathlib import Path
from typing import Callable, Optional, Tuple

from ..config.loader import ClientConfig, load_client_config
from ..errors import ContentLoadError, NotFoundError, TransportError
from ..models.content import Author, BlogPost, Category, DisplayPost, PageInfo, PostPage, StrapiResponse, Tag
from ..retrieval.client import DEFAULT_SORT, StrapiClient
from ..retrieval.query import PostsQuery
from ..utils.logging import get_logger
from ..utils.time import utc_now_z
from .result import Degraded, Ok, Outcome

logger = get_logger(__name__)

UNKNOWN_AUTHOR = "Unknown author"


def _to_page(response: StrapiResponse) -> PostPage:
    return PostPage(
        posts=response.data,
        pagination=PageInfo.from_pagination(response.meta.pagination),
    )


class ContentManager:
    """One method per content operation, composed over StrapiClient."""

    def __init__(self, client: StrapiClient, clock: Callable[[], str] = utc_now_z):
        """
        Args:
            client: Configured CMS client
            clock: Returns the current UTC time as an ISO string; used for
                the "already published" filter
        """
        self.client = client
        self._clock = clock

    @classmethod
    def from_config(cls, config: Optional[ClientConfig] = None, path: Path | None = None) -> "ContentManager":
        """Build a manager from explicit config, or from file/environment."""
        return cls(StrapiClient(config or load_client_config(path)))

    def _published_filter(self) -> dict:
        return {"publishedDate": {"$lte": self._clock()}}

    def _degrade(self, operation: str, error: Exception) -> Degraded:
        logger.error(f"Error fetching {operation}: {error}")
        return Degraded(value=(), cause=str(error))

    # Critical operations

    def get_posts_for_home_page(self, page: int = 1, page_size: int = 10) -> PostPage:
        """Published posts, newest first."""
        try:
            response = self.client.get_blog_posts(
                PostsQuery(
                    page=page,
                    page_size=page_size,
                    sort=DEFAULT_SORT,
                    filters=self._published_filter(),
                )
            )
        except Exception as e:
            logger.error(f"Error fetching posts for home page: {e}")
            raise ContentLoadError("Failed to load posts") from e
        return _to_page(response)

    def get_post_by_slug(self, slug: str) -> BlogPost:
        """
        Single post by slug.

        Raises:
            NotFoundError: No post has this slug
            TransportError: The CMS call failed
        """
        try:
            response = self.client.get_blog_post_by_slug(slug)
        except TransportError as e:
            logger.error(f"Error fetching post '{slug}': {e}")
            raise
        except Exception as e:
            logger.error(f"Error fetching post '{slug}': {e}")
            raise ContentLoadError(f"Failed to load post '{slug}'") from e

        if not response.data:
            raise NotFoundError(slug)
        return response.data[0]

    def get_posts_by_category(self, category_id: int, page: int = 1, page_size: int = 10) -> PostPage:
        try:
            response = self.client.get_posts_by_category(
                category_id,
                PostsQuery(page=page, page_size=page_size, sort=DEFAULT_SORT),
            )
        except Exception as e:
            logger.error(f"Error fetching posts for category {category_id}: {e}")
            raise ContentLoadError("Failed to load category posts") from e
        return _to_page(response)

    def search_posts(self, query: str, page: int = 1, page_size: int = 10) -> PostPage:
        try:
            response = self.client.search_posts(query, page=page, page_size=page_size)
        except Exception as e:
            logger.error(f"Error searching posts for '{query}': {e}")
            raise ContentLoadError("Failed to search posts") from e
        return _to_page(response)

    # Non-critical operations

    def get_related_posts(self, post_id: int, limit: int = 3) -> Outcome[Tuple[BlogPost, ...]]:
        try:
            return Ok(self.client.get_related_posts(post_id, limit).data)
        except Exception as e:
            return self._degrade("related posts", e)

    def get_featured_posts(self, limit: int = 5) -> Outcome[Tuple[BlogPost, ...]]:
        filters = {"featured": True, **self._published_filter()}
        try:
            response = self.client.get_blog_posts(
                PostsQuery(page_size=limit, sort=DEFAULT_SORT, filters=filters)
            )
            return Ok(response.data)
        except Exception as e:
            return self._degrade("featured posts", e)

    def get_recent_posts(self, limit: int = 5) -> Outcome[Tuple[BlogPost, ...]]:
        try:
            response = self.client.get_blog_posts(
                PostsQuery(page_size=limit, sort=DEFAULT_SORT, filters=self._published_filter())
            )
            return Ok(response.data)
        except Exception as e:
            return self._degrade("recent posts", e)

    def get_categories(self) -> Outcome[Tuple[Category, ...]]:
        try:
            return Ok(self.client.get_categories().data)
        except Exception as e:
            return self._degrade("categories", e)

    def get_authors(self) -> Outcome[Tuple[Author, ...]]:
        try:
            return Ok(self.client.get_authors().data)
        except Exception as e:
            return self._degrade("authors", e)

    def get_tags(self) -> Outcome[Tuple[Tag, ...]]:
        try:
            return Ok(self.client.get_tags().data)
        except Exception as e:
            return self._degrade("tags", e)

    def health_check(self) -> bool:
        """True if the CMS answers the categories call."""
        try:
            self.client.get_categories()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False
        return True

    # Presentation

    def format_post_for_display(self, post: BlogPost) -> DisplayPost:
        author = post.author
        avatar_url = None
        if author is not None and author.avatar is not None:
            avatar_url = self.client.get_optimized_image_url(author.avatar, "thumbnail")

        return DisplayPost.model_validate(
            {
                **post.model_dump(),
                "formatted_date": self.client.format_date(post.published_date),
                "reading_time": post.reading_time or self.client.calculate_reading_time(post.content),
                "hero_image_url": self.client.get_optimized_image_url(post.hero_image, "large"),
                "author_name": (author.name if author is not None else "") or UNKNOWN_AUTHOR,
                "author_avatar": avatar_url,
                "category_names": tuple(c.name for c in post.categories),
                "tag_names": tuple(t.name for t in post.tags),
            }
        )
