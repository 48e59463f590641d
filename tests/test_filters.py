import pytest

from services.store_service.filters import CatalogFilter, build_filter, classify_query


@pytest.mark.parametrize(
    "value, expected",
    [
        ("true", ("status", True)),
        ("false", ("status", False)),
        ("available", ("stock", "available")),
        ("unavailable", ("stock", "unavailable")),
        ("shoes", ("category", "shoes")),
        ("xyz", ("category", "xyz")),
        # the decision list is exact-match; anything else is a category
        ("True", ("category", "True")),
        ("Available", ("category", "Available")),
    ],
)
def test_classify_query(value, expected):
    assert classify_query(value) == expected


def test_no_params_gives_empty_filter():
    assert build_filter({}).is_empty
    assert build_filter({"limit": "5", "sort": "asc", "page": "2"}).is_empty


def test_separate_params_are_combined():
    f = build_filter({"category": "shoes", "status": "true", "stock": "available"})
    assert f == CatalogFilter(category="shoes", status=True, stock="available")


def test_status_param_other_than_true_means_false():
    assert build_filter({"status": "false"}).status is False
    assert build_filter({"status": "yes"}).status is False


def test_unknown_stock_param_is_ignored():
    assert build_filter({"stock": "lots"}).stock is None


def test_empty_values_count_as_absent():
    assert build_filter({"category": "", "status": "", "stock": "", "query": ""}).is_empty


@pytest.mark.parametrize(
    "query, expected",
    [
        ("true", CatalogFilter(status=True)),
        ("false", CatalogFilter(status=False)),
        ("available", CatalogFilter(stock="available")),
        ("unavailable", CatalogFilter(stock="unavailable")),
        ("xyz", CatalogFilter(category="xyz")),
    ],
)
def test_query_param_fills_one_field(query, expected):
    assert build_filter({"query": query}) == expected


def test_explicit_param_wins_over_query():
    f = build_filter({"category": "hats", "query": "shoes"})
    assert f.category == "hats"


def test_query_combines_with_other_explicit_params():
    f = build_filter({"category": "hats", "query": "available"})
    assert f == CatalogFilter(category="hats", stock="available")
