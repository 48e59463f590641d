import asyncio
from decimal import Decimal

from services.store_service.cart_aggregator import CartAggregator, summarize
from services.store_service.schemas import CartLineOut, CartOut, ProductOut

from .factories import product_data


def run(coro):
    return asyncio.run(coro)


def product(pid, price):
    return ProductOut(
        id=pid,
        title=f"P{pid}",
        description="d",
        code=f"C{pid}",
        price=price,
        stock=1,
        category="misc",
        status=True,
    )


def test_totals():
    summary = summarize([(product(1, 10.00), 2), (product(2, 5.00), 1)])
    assert summary.total == Decimal("25.00")
    assert str(summary.total) == "25.00"
    assert summary.item_count == 3
    assert summary.has_products is True
    assert [line.subtotal for line in summary.lines] == [Decimal("20.00"), Decimal("5.00")]


def test_deleted_product_is_skipped():
    summary = summarize([(product(1, 10.00), 2), (None, 4), (product(2, 5.00), 1)])
    assert summary.total == Decimal("25.00")
    assert summary.item_count == 3
    assert len(summary.lines) == 2


def test_only_deleted_products_still_has_products():
    summary = summarize([(None, 2)])
    assert summary.total == Decimal("0.00")
    assert summary.item_count == 0
    assert summary.has_products is True


def test_empty_cart():
    summary = summarize([])
    assert summary.total == Decimal("0.00")
    assert summary.item_count == 0
    assert summary.has_products is False


def test_no_float_drift():
    summary = summarize([(product(1, 0.1), 3), (product(2, 19.99), 3)])
    assert summary.total == Decimal("60.27")


def test_aggregate_resolves_live_products(catalog):
    a = run(catalog.add_product(product_data("A", price=10)))
    b = run(catalog.add_product(product_data("B", price=5)))
    gone = run(catalog.add_product(product_data("GONE", price=100)))
    run(catalog.delete_product(gone.id))

    cart = CartOut(
        id="c1",
        products=[
            CartLineOut(product=a.id, quantity=2),
            CartLineOut(product=gone.id, quantity=1),
            CartLineOut(product=b.id, quantity=1),
        ],
    )
    summary = run(CartAggregator(catalog).aggregate(cart))
    assert summary.total == Decimal("25.00")
    assert summary.item_count == 3
    assert [line.product.code for line in summary.lines] == ["A", "B"]
