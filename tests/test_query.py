"""Tests for query-string construction and parsing."""

import pytest
from pydantic import ValidationError

from blogcms.retrieval.query import (
    PostsQuery,
    build_filter_params,
    build_query_params,
    encode_query,
    parse_query_params,
)


def test_pagination_sort_and_populate_order():
    query = PostsQuery(page=2, page_size=5, sort="publishedDate:desc", populate=("author", "tags"))

    assert build_query_params(query) == [
        ("pagination[page]", "2"),
        ("pagination[pageSize]", "5"),
        ("sort", "publishedDate:desc"),
        ("populate", "author,tags"),
    ]


def test_scalar_and_operator_filters():
    pairs = build_filter_params({"featured": True, "publishedDate": {"$lte": "2026-10-17", "$gte": "2026-01-01"}})

    assert pairs == [
        ("filters[featured]", "true"),
        ("filters[publishedDate][$lte]", "2026-10-17"),
        ("filters[publishedDate][$gte]", "2026-01-01"),
    ]


def test_none_values_are_omitted_at_every_depth():
    query = PostsQuery(filters={"author": None, "id": {"$ne": None}, "slug": {"$eq": "a", "$ne": None}})
    encoded = encode_query(build_query_params(query))

    assert "author" not in encoded
    assert "[id]" not in encoded
    assert "null" not in encoded
    assert "None" not in encoded
    assert encoded == "filters[slug][$eq]=a"


def test_list_of_mappings_is_indexed():
    pairs = build_filter_params(
        {"$or": [{"title": {"$containsi": "astro"}}, {"description": {"$containsi": "astro"}}]}
    )

    assert pairs == [
        ("filters[$or][0][title][$containsi]", "astro"),
        ("filters[$or][1][description][$containsi]", "astro"),
    ]


def test_list_of_scalars_is_indexed():
    query = PostsQuery(filters={"categories": [3, 5]})

    encoded = encode_query(build_query_params(query))

    assert encoded == "filters[categories][0]=3&filters[categories][1]=5"
    assert parse_query_params(encoded)["filters"] == {"categories": {"0": "3", "1": "5"}}


def test_operator_list_value_is_comma_joined():
    assert build_filter_params({"id": {"$in": [3, 5]}}) == [("filters[id][$in]", "3,5")]


def test_deeper_nesting():
    assert build_filter_params({"categories": {"id": {"$eq": 3}}}) == [("filters[categories][id][$eq]", "3")]


def test_encode_keeps_brackets_literal_and_escapes_values():
    encoded = encode_query([("filters[title][$containsi]", "a&b c")])

    assert encoded == "filters[title][$containsi]=a%26b+c"


def test_round_trip_recovers_scalar_and_operator_filters():
    filters = {
        "slug": "hello-world",
        "featured": "true",
        "id": {"$ne": "12"},
        "publishedDate": {"$lte": "2026-10-17T12:00:00.000Z"},
    }
    query = PostsQuery(page=3, page_size=7, sort="title:asc", filters=filters)

    parsed = parse_query_params(encode_query(build_query_params(query)))

    assert parsed["filters"] == filters
    assert parsed["pagination"] == {"page": "3", "pageSize": "7"}
    assert parsed["sort"] == "title:asc"


def test_parse_handles_leading_question_mark_and_indexes():
    parsed = parse_query_params("?filters[$or][0][title][$containsi]=astro")

    assert parsed == {"filters": {"$or": {"0": {"title": {"$containsi": "astro"}}}}}


def test_with_filters_returns_new_query():
    base = PostsQuery(page=2, filters={"featured": True})
    extended = base.with_filters(categories={"id": {"$eq": 3}})

    assert base.filters == {"featured": True}
    assert extended.filters == {"featured": True, "categories": {"id": {"$eq": 3}}}
    assert extended.page == 2


@pytest.mark.parametrize("field", ["page", "page_size"])
def test_page_values_must_be_positive(field):
    with pytest.raises(ValidationError):
        PostsQuery(**{field: 0})
