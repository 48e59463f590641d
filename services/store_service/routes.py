from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from .cart_aggregator import CartAggregator
from .cart_service import CartService
from .catalog_service import API_PRODUCTS_PATH, CatalogService
from .schemas import (
    AddProductRequest,
    CartOut,
    CartSummaryLine,
    CartSummaryOut,
    PageResult,
    PopulatedCartOut,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    ReplaceCartRequest,
    UpdateQuantityRequest,
)

products_router = APIRouter(prefix="/api/products", tags=["products"])
carts_router = APIRouter(prefix="/api/carts", tags=["carts"])


# Collaborators are built once in the app lifespan and kept on app.state
def get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog


def get_cart_service(request: Request) -> CartService:
    return request.app.state.carts


def get_aggregator(request: Request) -> CartAggregator:
    return request.app.state.aggregator


# ----------------------------------------------------------------------
# Products
# ----------------------------------------------------------------------


@products_router.get("", response_model=PageResult)
async def list_products(request: Request, catalog: CatalogService = Depends(get_catalog)):
    """Paginated catalog: ?limit&page&sort&category&status&stock&query."""
    result = await catalog.get_products(request.query_params.multi_items(), API_PRODUCTS_PATH)
    if result.status == "error":
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=result.model_dump())
    return result


@products_router.get("/{pid}", response_model=ProductResponse)
async def get_product(pid: int, catalog: CatalogService = Depends(get_catalog)) -> ProductResponse:
    return ProductResponse(payload=await catalog.get_product(pid))


@products_router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def add_product(data: ProductCreate, catalog: CatalogService = Depends(get_catalog)) -> ProductResponse:
    return ProductResponse(payload=await catalog.add_product(data))


@products_router.put("/{pid}", response_model=ProductResponse)
async def update_product(
    pid: int, data: ProductUpdate, catalog: CatalogService = Depends(get_catalog)
) -> ProductResponse:
    return ProductResponse(payload=await catalog.update_product(pid, data))


@products_router.delete("/{pid}")
async def delete_product(pid: int, catalog: CatalogService = Depends(get_catalog)) -> dict:
    await catalog.delete_product(pid)
    return {"status": "success", "message": f"Product {pid} deleted"}


# ----------------------------------------------------------------------
# Carts
# ----------------------------------------------------------------------


@carts_router.post("", response_model=CartOut, status_code=status.HTTP_201_CREATED)
async def create_cart(carts: CartService = Depends(get_cart_service)) -> CartOut:
    return await carts.create_cart()


@carts_router.get("/{cid}", response_model=PopulatedCartOut)
async def get_cart(cid: str, carts: CartService = Depends(get_cart_service)) -> PopulatedCartOut:
    """Cart with full product records; deleted products appear as null."""
    return await carts.get_populated_cart(cid)


@carts_router.get("/{cid}/summary", response_model=CartSummaryOut)
async def get_cart_summary(
    cid: str,
    carts: CartService = Depends(get_cart_service),
    aggregator: CartAggregator = Depends(get_aggregator),
) -> CartSummaryOut:
    summary = await aggregator.aggregate(await carts.get_cart(cid))
    return CartSummaryOut(
        cart_id=cid,
        lines=[
            CartSummaryLine(product=line.product, quantity=line.quantity, subtotal=line.subtotal)
            for line in summary.lines
        ],
        total=summary.total,
        item_count=summary.item_count,
        has_products=summary.has_products,
    )


@carts_router.post("/{cid}/product/{pid}", response_model=CartOut)
async def add_product_to_cart(
    cid: str,
    pid: int,
    body: Optional[AddProductRequest] = None,
    carts: CartService = Depends(get_cart_service),
) -> CartOut:
    quantity = body.quantity if body is not None else 1
    return await carts.add_product(cid, pid, quantity)


@carts_router.delete("/{cid}/products/{pid}", response_model=CartOut)
async def remove_product_from_cart(cid: str, pid: int, carts: CartService = Depends(get_cart_service)) -> CartOut:
    return await carts.remove_product(cid, pid)


@carts_router.put("/{cid}", response_model=CartOut)
async def replace_cart(
    cid: str, body: ReplaceCartRequest, carts: CartService = Depends(get_cart_service)
) -> CartOut:
    return await carts.replace_products(cid, [line.model_dump() for line in body.products])


@carts_router.put("/{cid}/products/{pid}", response_model=CartOut)
async def update_cart_quantity(
    cid: str, pid: int, body: UpdateQuantityRequest, carts: CartService = Depends(get_cart_service)
) -> CartOut:
    return await carts.update_quantity(cid, pid, body.quantity)


@carts_router.delete("/{cid}")
async def clear_cart(cid: str, carts: CartService = Depends(get_cart_service)) -> dict:
    cart = await carts.clear_cart(cid)
    return {"status": "success", "message": "Cart cleared", "cart": cart.model_dump()}
