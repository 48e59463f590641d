"""Server-rendered pages. Templates receive plain page/cart data."""

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from .cart_aggregator import CartAggregator
from .cart_service import CartService
from .catalog_service import CatalogService
from .feed import FEED_SNAPSHOT_LIMIT
from .routes import get_aggregator, get_cart_service, get_catalog

VIEW_PRODUCTS_PATH = "/products"

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

router = APIRouter(tags=["views"], include_in_schema=False)


async def _page_context(request: Request, catalog: CatalogService) -> dict:
    result = await catalog.get_products(request.query_params.multi_items(), VIEW_PRODUCTS_PATH)
    if result.status == "error":
        return {"products": [], "page": None, "error": result.message}
    return {"products": result.payload, "page": result, "error": None}


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, catalog: CatalogService = Depends(get_catalog)):
    return templates.TemplateResponse(request, "home.html", await _page_context(request, catalog))


@router.get("/products", response_class=HTMLResponse)
async def products_page(request: Request, catalog: CatalogService = Depends(get_catalog)):
    context = await _page_context(request, catalog)
    context["params"] = dict(request.query_params)
    return templates.TemplateResponse(request, "products.html", context)


@router.get("/realtimeproducts", response_class=HTMLResponse)
async def realtime_products(request: Request, catalog: CatalogService = Depends(get_catalog)):
    products = await catalog.list_products(limit=FEED_SNAPSHOT_LIMIT, newest_first=True)
    return templates.TemplateResponse(request, "realtime_products.html", {"products": products})


@router.get("/carts/{cid}", response_class=HTMLResponse)
async def cart_page(
    cid: str,
    request: Request,
    carts: CartService = Depends(get_cart_service),
    aggregator: CartAggregator = Depends(get_aggregator),
):
    summary = await aggregator.aggregate(await carts.get_cart(cid))
    return templates.TemplateResponse(request, "cart.html", {"cart_id": cid, "summary": summary})
