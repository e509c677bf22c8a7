"""Typed content models for CMS responses.

Models accept the backend's camelCase keys as well as snake_case names,
ignore unknown fields and are frozen. Relation lists are tuples so a
decoded response is an immutable snapshot.

Both response shapes the backend produces are accepted:

* flat entries (``{"id": 1, "title": ...}``)
* wrapped entries (``{"id": 1, "attributes": {...}}``) with relations
  wrapped as ``{"data": ...}``
"""

from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def _unwrap_relation(value: Any) -> Any:
    """Strip a ``{"data": ...}`` relation wrapper, leaving other values alone."""
    if isinstance(value, dict) and "data" in value and set(value) <= {"data", "meta"}:
        return value["data"]
    return value


class CMSModel(BaseModel):
    """Base for all entities decoded from the CMS."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize_entry(cls, value: Any) -> Any:
        value = _unwrap_relation(value)
        if not isinstance(value, dict):
            return value
        attributes = value.get("attributes")
        if isinstance(attributes, dict):
            merged = {k: v for k, v in value.items() if k != "attributes"}
            merged.update(attributes)
            value = merged
        # Explicit nulls fall back to field defaults
        unwrapped = {k: _unwrap_relation(v) for k, v in value.items()}
        return {k: v for k, v in unwrapped.items() if v is not None}


class ImageFormat(CMSModel):
    """Pre-generated resized copy of an image."""
    name: str = ""
    hash: str = ""
    ext: str = ""
    mime: str = ""
    path: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    size: Optional[float] = None
    url: str = ""


class StrapiImage(CMSModel):
    id: Optional[int] = None
    name: str = ""
    alternative_text: Optional[str] = None
    caption: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    formats: Dict[str, ImageFormat] = Field(default_factory=dict)
    hash: str = ""
    ext: str = ""
    mime: str = ""
    size: Optional[float] = None
    url: str = ""
    preview_url: Optional[str] = None
    provider: str = ""
    # The CMS sends this key in snake_case
    provider_metadata: Optional[Dict[str, Any]] = Field(default=None, alias="provider_metadata")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Author(CMSModel):
    id: Optional[int] = None
    document_id: Optional[str] = None
    name: str = ""
    email: str = ""
    bio: str = ""
    avatar: Optional[StrapiImage] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Category(CMSModel):
    id: Optional[int] = None
    document_id: Optional[str] = None
    name: str = ""
    slug: str = ""
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Tag(CMSModel):
    id: Optional[int] = None
    document_id: Optional[str] = None
    name: str = ""
    slug: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class BlogPost(CMSModel):
    """A published blog post with its expanded relations."""

    id: Optional[int] = None
    document_id: Optional[str] = None
    title: str = ""
    description: str = ""
    content: str = ""
    slug: str = ""
    published_date: Optional[str] = None  # raw ISO 8601, used for filtering/sorting
    published_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    featured: bool = False
    reading_time: Optional[int] = None
    author: Optional[Author] = None
    categories: Tuple[Category, ...] = ()
    tags: Tuple[Tag, ...] = ()
    hero_image: Optional[StrapiImage] = None


class Pagination(CMSModel):
    """Pagination metadata. Defaults apply when the backend omits fields."""
    page: int = 1
    page_size: Optional[int] = None
    page_count: int = 1
    total: int = 0


class ResponseMeta(CMSModel):
    pagination: Pagination = Field(default_factory=Pagination)


class StrapiResponse(BaseModel, Generic[T]):
    """The ``{data, meta}`` envelope every CMS response uses."""

    model_config = ConfigDict(frozen=True)

    data: T
    meta: ResponseMeta = Field(default_factory=ResponseMeta)

    @model_validator(mode="before")
    @classmethod
    def _null_meta(cls, value: Any) -> Any:
        if isinstance(value, dict) and value.get("meta") is None:
            return {k: v for k, v in value.items() if k != "meta"}
        return value


class PageInfo(BaseModel):
    """Pagination summary handed to page renderers."""

    model_config = ConfigDict(frozen=True)

    page: int = 1
    total_pages: int = 1
    total_posts: int = 0

    @classmethod
    def from_pagination(cls, pagination: Pagination) -> "PageInfo":
        return cls(
            page=pagination.page or 1,
            total_pages=pagination.page_count or 1,
            total_posts=pagination.total or 0,
        )


class PostPage(BaseModel):
    """One page of posts plus its pagination summary."""

    model_config = ConfigDict(frozen=True)

    posts: Tuple[BlogPost, ...] = ()
    pagination: PageInfo = Field(default_factory=PageInfo)


class DisplayPost(BlogPost):
    """A post with derived display fields."""

    formatted_date: str = ""
    reading_time: int = 0
    hero_image_url: str = ""
    author_name: str = ""
    author_avatar: Optional[str] = None
    category_names: Tuple[str, ...] = ()
    tag_names: Tuple[str, ...] = ()
