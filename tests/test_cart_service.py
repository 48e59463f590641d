import asyncio

import pytest

from services.store_service.errors import InvalidInputError, NotFoundError

from .factories import product_data


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def products(catalog):
    return [run(catalog.add_product(product_data(code, price=price))) for code, price in (("A", 10), ("B", 5))]


@pytest.fixture
def cart_id(carts):
    return run(carts.create_cart()).id


def lines(cart):
    return [(line.product, line.quantity) for line in cart.products]


def test_new_cart_is_empty_and_never_expires(carts, redis_client):
    cart = run(carts.create_cart())
    assert cart.products == []
    assert run(carts.get_cart(cart.id)).products == []
    assert redis_client.ttl(f"cart:{cart.id}") == -1


def test_missing_cart(carts, products):
    with pytest.raises(NotFoundError):
        run(carts.get_cart("nope"))
    with pytest.raises(NotFoundError):
        run(carts.add_product("nope", products[0].id))


def test_adding_same_product_increments(carts, cart_id, products):
    a, b = products
    run(carts.add_product(cart_id, a.id, 2))
    run(carts.add_product(cart_id, b.id))
    cart = run(carts.add_product(cart_id, a.id, 3))
    assert lines(cart) == [(a.id, 5), (b.id, 1)]
    assert lines(run(carts.get_cart(cart_id))) == [(a.id, 5), (b.id, 1)]


def test_add_unknown_product(carts, cart_id):
    with pytest.raises(NotFoundError):
        run(carts.add_product(cart_id, 404))


@pytest.mark.parametrize("quantity", [0, -1, "2", 1.5, True])
def test_add_rejects_bad_quantity(carts, cart_id, products, quantity):
    with pytest.raises(InvalidInputError):
        run(carts.add_product(cart_id, products[0].id, quantity))


def test_concurrent_adds_do_not_lose_updates(carts, cart_id, products):
    a = products[0]

    async def add_many():
        await asyncio.gather(*(carts.add_product(cart_id, a.id, 1) for _ in range(25)))

    run(add_many())
    assert lines(run(carts.get_cart(cart_id))) == [(a.id, 25)]
    assert len(carts.locks) == 0


def test_remove_product(carts, cart_id, products):
    a, b = products
    run(carts.add_product(cart_id, a.id))
    run(carts.add_product(cart_id, b.id))
    cart = run(carts.remove_product(cart_id, a.id))
    assert lines(cart) == [(b.id, 1)]
    # removing something that is not there is a no-op
    assert lines(run(carts.remove_product(cart_id, a.id))) == [(b.id, 1)]


def test_replace_products_merges_duplicates(carts, cart_id, products):
    a, b = products
    run(carts.add_product(cart_id, b.id, 9))
    cart = run(
        carts.replace_products(
            cart_id,
            [{"product": a.id, "quantity": 1}, {"product": b.id, "quantity": 2}, {"product": a.id, "quantity": 3}],
        )
    )
    assert lines(cart) == [(a.id, 4), (b.id, 2)]


def test_replace_products_validates_every_line(carts, cart_id, products):
    a = products[0]
    with pytest.raises(InvalidInputError):
        run(carts.replace_products(cart_id, [{"product": a.id, "quantity": 0}]))
    with pytest.raises(InvalidInputError):
        run(carts.replace_products(cart_id, [{"quantity": 1}]))
    with pytest.raises(NotFoundError):
        run(carts.replace_products(cart_id, [{"product": a.id, "quantity": 1}, {"product": 404, "quantity": 1}]))
    assert run(carts.get_cart(cart_id)).products == []


def test_update_quantity(carts, cart_id, products):
    a, b = products
    run(carts.add_product(cart_id, a.id))
    cart = run(carts.update_quantity(cart_id, a.id, 7))
    assert lines(cart) == [(a.id, 7)]

    with pytest.raises(NotFoundError):
        run(carts.update_quantity(cart_id, b.id, 1))
    with pytest.raises(InvalidInputError):
        run(carts.update_quantity(cart_id, a.id, 0))


def test_clear_cart(carts, cart_id, products):
    run(carts.add_product(cart_id, products[0].id))
    assert run(carts.clear_cart(cart_id)).products == []
    assert run(carts.get_cart(cart_id)).products == []
    with pytest.raises(NotFoundError):
        run(carts.clear_cart("nope"))


def test_populated_cart_shows_deleted_products_as_none(carts, catalog, cart_id, products):
    a, b = products
    run(carts.add_product(cart_id, a.id, 2))
    run(carts.add_product(cart_id, b.id))
    run(catalog.delete_product(a.id))

    cart = run(carts.get_populated_cart(cart_id))
    assert cart.products[0].product is None
    assert cart.products[0].quantity == 2
    assert cart.products[1].product.code == "B"
