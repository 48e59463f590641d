PRODUCT = {
    "title": "Trail Runner",
    "description": "Lightweight trail running shoe",
    "price": 10.0,
    "category": "shoes",
    "stock": 4,
}


def create_product(client, code, **overrides):
    response = client.post("/api/products", json={**PRODUCT, "code": code, **overrides})
    return response.json()["payload"]


def test_home_lists_products(client):
    create_product(client, "A", title="Alpine Boot")
    create_product(client, "B", title="Beach Sandal", stock=0)
    response = client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "Alpine Boot" in response.text
    assert "Beach Sandal" in response.text
    assert "out of stock" in response.text


def test_products_page_links_stay_on_the_view(client):
    for code in ("A", "B", "C"):
        create_product(client, code)
    response = client.get("/products?limit=1&sort=asc&page=2")
    assert response.status_code == 200
    assert 'href="/products?limit=1&amp;sort=asc&amp;page=1"' in response.text
    assert 'href="/products?limit=1&amp;sort=asc&amp;page=3"' in response.text
    assert "Page 2 of 3" in response.text


def test_empty_catalog_view(client):
    response = client.get("/products?query=nothing-matches")
    assert response.status_code == 200
    assert "No products found." in response.text


def test_realtime_page_opens_feed(client):
    create_product(client, "A", title="Alpine Boot")
    response = client.get("/realtimeproducts")
    assert response.status_code == 200
    assert "/ws/products" in response.text
    assert "Alpine Boot" in response.text


def test_cart_page_shows_totals(client):
    a = create_product(client, "A", title="Alpine Boot", price=10)
    b = create_product(client, "B", title="Beach Sandal", price=5)
    cid = client.post("/api/carts").json()["id"]
    client.post(f"/api/carts/{cid}/product/{a['id']}", json={"quantity": 2})
    client.post(f"/api/carts/{cid}/product/{b['id']}")

    response = client.get(f"/carts/{cid}")
    assert response.status_code == 200
    assert "Alpine Boot" in response.text
    assert "Items: 3" in response.text
    assert "Total: $25.00" in response.text


def test_empty_cart_page(client):
    cid = client.post("/api/carts").json()["id"]
    response = client.get(f"/carts/{cid}")
    assert "Your cart is empty." in response.text


def test_unknown_cart_page(client):
    assert client.get("/carts/unknown").status_code == 404
