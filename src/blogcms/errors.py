"""Error taxonomy for the content client."""

from typing import Optional


class BlogCMSError(Exception):
    """Base class for all content client errors."""


class ConfigError(BlogCMSError):
    """Raised when the client configuration is malformed."""


class TransportError(BlogCMSError):
    """
    HTTP call to the CMS failed.

    Raised for non-2xx responses, connection failures and undecodable bodies.
    Never retried by this package; the caller decides.
    """

    def __init__(self, status_code: Optional[int], status_text: str, url: Optional[str] = None):
        self.status_code = status_code
        self.status_text = status_text
        self.url = url
        if status_code is None:
            message = f"Strapi API error: {status_text}"
        else:
            message = f"Strapi API error: {status_code} {status_text}"
        super().__init__(message)


class NotFoundError(BlogCMSError):
    """A by-slug lookup matched zero items."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Post not found: {slug}")


class ContentLoadError(BlogCMSError):
    """Critical operation failed; the underlying error is chained as __cause__."""
