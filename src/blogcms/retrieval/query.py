"""Request descriptors and query-string serialization for the CMS REST API.

The backend uses bracketed keys for nested parameters::

    pagination[page]=2&pagination[pageSize]=5&sort=publishedDate:desc
    &populate=author,categories&filters[publishedDate][$lte]=2026-10-17T11:00:00.000Z

Filter values may be scalars, operator mappings (nested to any depth) or
lists. ``None`` is omitted at every depth.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, urlencode

from pydantic import BaseModel, ConfigDict, Field

# Characters left unescaped so query strings stay readable in logs and tests
SAFE_QUERY_CHARS = "[]$:,"

_KEY_PART_RE = re.compile(r"\[([^\]]*)\]")

QueryPairs = List[Tuple[str, str]]


class PostsQuery(BaseModel):
    """Structured request: pagination, sort, filters and relations to expand."""

    model_config = ConfigDict(frozen=True)

    page: Optional[int] = Field(default=None, ge=1)
    page_size: Optional[int] = Field(default=None, ge=1)
    sort: Optional[str] = None
    filters: Dict[str, Any] = Field(default_factory=dict)
    populate: Tuple[str, ...] = ()

    def with_filters(self, **extra: Any) -> "PostsQuery":
        """Return a copy with ``extra`` merged over the existing filters."""
        merged = dict(self.filters)
        merged.update(extra)
        return self.model_copy(update={"filters": merged})


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten_filter(prefix: str, value: Any, out: QueryPairs, operator_value: bool = False) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, nested in value.items():
            _flatten_filter(f"{prefix}[{key}]", nested, out, operator_value=True)
    elif isinstance(value, (list, tuple)):
        if operator_value and not any(isinstance(item, Mapping) for item in value):
            # Operator values such as $in take a single comma-joined string
            items = [_format_scalar(item) for item in value if item is not None]
            if items:
                out.append((prefix, ",".join(items)))
            return
        for index, item in enumerate(value):
            _flatten_filter(f"{prefix}[{index}]", item, out)
    else:
        out.append((prefix, _format_scalar(value)))


def build_filter_params(filters: Mapping[str, Any]) -> QueryPairs:
    """Serialize a filter mapping into ``filters[...]`` pairs, in insertion order."""
    pairs: QueryPairs = []
    for key, value in filters.items():
        _flatten_filter(f"filters[{key}]", value, pairs)
    return pairs


def build_query_params(query: PostsQuery) -> QueryPairs:
    """
    Serialize a request descriptor into ordered query pairs.

    Order: pagination, sort, populate, filters.
    """
    pairs: QueryPairs = []
    if query.page is not None:
        pairs.append(("pagination[page]", str(query.page)))
    if query.page_size is not None:
        pairs.append(("pagination[pageSize]", str(query.page_size)))
    if query.sort:
        pairs.append(("sort", query.sort))
    if query.populate:
        pairs.append(("populate", ",".join(query.populate)))
    pairs.extend(build_filter_params(query.filters))
    return pairs


def encode_query(pairs: QueryPairs) -> str:
    """URL-encode query pairs, leaving bracket syntax and operators literal."""
    return urlencode(pairs, safe=SAFE_QUERY_CHARS)


def _split_key(key: str) -> List[str]:
    head, _, rest = key.partition("[")
    parts = [head]
    if rest:
        parts.extend(_KEY_PART_RE.findall("[" + rest))
    return parts


def _insert(target: Dict[str, Any], parts: List[str], value: str) -> None:
    node = target
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


def parse_query_params(query_string: str) -> Dict[str, Any]:
    """
    Parse a bracketed query string back into a nested mapping.

    Values stay strings; indexed segments (``[0]``) become string keys.

    >>> parse_query_params("filters[slug][$eq]=hello&sort=title:asc")
    {'filters': {'slug': {'$eq': 'hello'}}, 'sort': 'title:asc'}
    """
    result: Dict[str, Any] = {}
    for key, value in parse_qsl(query_string.lstrip("?"), keep_blank_values=True):
        _insert(result, _split_key(key), value)
    return result
