from services.store_service.links import build_page_link, build_page_links

PARAMS = [("limit", "5"), ("sort", "asc"), ("category", "shoes")]


def test_middle_page_links_keep_parameters():
    prev_link, next_link = build_page_links("/api/products", PARAMS, 1, 3, True, True)
    assert prev_link == "/api/products?limit=5&sort=asc&category=shoes&page=1"
    assert next_link == "/api/products?limit=5&sort=asc&category=shoes&page=3"


def test_last_page_has_no_next_link():
    prev_link, next_link = build_page_links("/api/products", PARAMS, 3, None, True, False)
    assert prev_link == "/api/products?limit=5&sort=asc&category=shoes&page=3"
    assert next_link is None


def test_first_page_has_no_prev_link():
    prev_link, next_link = build_page_links("/api/products", PARAMS, None, 2, False, True)
    assert prev_link is None
    assert next_link.endswith("&page=2")


def test_original_page_param_is_dropped():
    link = build_page_link("/api/products", [("page", "2"), ("limit", "5"), ("query", "true")], 3)
    assert link == "/api/products?limit=5&query=true&page=3"


def test_no_parameters():
    assert build_page_link("/products", [], 2) == "/products?page=2"


def test_repeated_parameters_are_all_kept():
    link = build_page_link("/api/products", [("category", "a"), ("category", "b")], 2)
    assert link == "/api/products?category=a&category=b&page=2"


def test_unknown_parameters_are_preserved_verbatim():
    link = build_page_link("/api/products", [("sort", "weird"), ("foo", "bar")], 2)
    assert link == "/api/products?sort=weird&foo=bar&page=2"
