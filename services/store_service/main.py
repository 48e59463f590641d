"""
store_service/main.py - Catalog and Shopping Cart Service

PURPOSE:
    Product catalog CRUD with filtered, sorted, paginated listing; shopping
    carts; server-rendered catalog and cart pages; and a live product feed
    over WebSocket (mirrored to Kafka when configured).

API ENDPOINTS:
    GET    /api/products                    - Paginated catalog (?limit&page&sort&category&status&stock&query)
    GET    /api/products/{pid}              - Product details
    POST   /api/products                    - Create product
    PUT    /api/products/{pid}              - Partial update
    DELETE /api/products/{pid}              - Delete product
    POST   /api/carts                       - Create empty cart
    GET    /api/carts/{cid}                 - Cart with products resolved
    GET    /api/carts/{cid}/summary         - Cart totals
    POST   /api/carts/{cid}/product/{pid}   - Add product (body: {"quantity": n}, default 1)
    DELETE /api/carts/{cid}/products/{pid}  - Remove product line
    PUT    /api/carts/{cid}                 - Replace all lines (body: {"products": [...]})
    PUT    /api/carts/{cid}/products/{pid}  - Set quantity (body: {"quantity": n})
    DELETE /api/carts/{cid}                 - Clear cart
    GET    /health                          - Health check

VIEWS:
    /, /products, /realtimeproducts, /carts/{cid}

WEBSOCKET:
    /ws/products - full catalog snapshot on connect, on "requestProducts" and after every change

DATA STORAGE:
    - PostgreSQL (SQLAlchemy): products
    - Redis: carts (key "cart:{cid}", JSON list of {"product": id, "quantity": n}, no TTL)

ERRORS:
    Every failure is answered with {"status": "error", "kind": ..., "message": ...}:
    not_found -> 404, validation/conflict -> 400, internal -> 500 (generic message).

TESTING COMMANDS:
    curl -X POST http://localhost:8080/api/products -H "Content-Type: application/json" \
      -d '{"title": "Mouse", "description": "Wireless mouse", "code": "PER-100", "price": 25, "category": "peripherals", "stock": 10}'
    curl "http://localhost:8080/api/products?limit=5&sort=asc&category=peripherals"
    curl -X POST http://localhost:8080/api/carts
    curl -X POST http://localhost:8080/api/carts/<cid>/product/1 -H "Content-Type: application/json" -d '{"quantity": 2}'
    curl http://localhost:8080/api/carts/<cid>/summary
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import redis
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic_settings import BaseSettings

from shared.database import DATABASE_URL, build_engine, build_session_factory, init_db
from shared.kafka_client import BaseKafkaProducer
from shared.logging_config import setup_logging
from shared.topic_initializer import create_topics

from . import feed as feed_module
from . import routes, views
from .cart_aggregator import CartAggregator
from .cart_repository import CartRepository
from .cart_service import CartService
from .catalog_service import CatalogService
from .errors import InternalError, StoreError
from .feed import CatalogFeed
from .schemas import HealthResponse
from .seed_data import seed_products

SERVICE_NAME = "store-service"
SERVICE_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings."""

    database_url: str = os.getenv("DATABASE_URL", DATABASE_URL)
    redis_host: str = os.getenv("REDIS_HOST", "localhost")
    redis_port: int = int(os.getenv("REDIS_PORT", "6379"))
    redis_db: int = int(os.getenv("REDIS_DB", "0"))
    # Empty disables Kafka; the WebSocket feed works either way
    kafka_bootstrap_servers: str = os.getenv("KAFKA_BOOTSTRAP_SERVERS", "")
    store_service_port: int = int(os.getenv("STORE_SERVICE_PORT", "8080"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    seed_demo_data: bool = os.getenv("SEED_DEMO_DATA", "true").lower() in ("1", "true", "yes")


def _describe_validation_error(exc: RequestValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query"))
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid request: " + "; ".join(problems)


def create_app(
    settings: Optional[Settings] = None,
    redis_client: Optional[redis.Redis] = None,
    producer: Optional[BaseKafkaProducer] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Clients passed in are used as-is and left open on shutdown; clients built
    from settings are owned and closed by the app.
    """
    settings = settings or Settings()

    # Initialization phase (before yield): database, Redis, Kafka, services.
    # Cleanup phase (after yield): close what this app opened.
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Store Service...")

        engine = build_engine(settings.database_url)
        try:
            init_db(engine)
            logger.info("Database initialized")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise
        session_factory = build_session_factory(engine)

        if settings.seed_demo_data:
            try:
                with session_factory() as db:
                    seed_products(db)
            except Exception as e:
                logger.error(f"Failed to seed products: {e}")

        cart_redis = redis_client
        if cart_redis is None:
            try:
                cart_redis = redis.Redis(
                    host=settings.redis_host,
                    port=settings.redis_port,
                    db=settings.redis_db,
                    decode_responses=True,
                )
                cart_redis.ping()
                logger.info("Redis connected")
            except Exception as e:
                logger.error(f"Failed to connect to Redis: {e}")
                raise

        kafka_producer = producer
        if kafka_producer is None and settings.kafka_bootstrap_servers:
            try:
                create_topics(settings.kafka_bootstrap_servers)
                kafka_producer = BaseKafkaProducer(settings.kafka_bootstrap_servers, client_id="store-producer")
                logger.info("Kafka producer initialized")
            except Exception as e:
                logger.error(f"Failed to initialize Kafka producer: {e}")
                raise

        catalog = CatalogService(session_factory)
        catalog_feed = CatalogFeed(catalog, kafka_producer)
        catalog.add_listener(catalog_feed.catalog_changed)

        app.state.catalog = catalog
        app.state.feed = catalog_feed
        app.state.carts = CartService(CartRepository(cart_redis), catalog)
        app.state.aggregator = CartAggregator(catalog)

        yield

        logger.info("Shutting down Store Service...")
        if redis_client is None:
            cart_redis.close()
        if producer is None and kafka_producer is not None:
            kafka_producer.close()
        engine.dispose()

    app = FastAPI(title="Store Service", version=SERVICE_VERSION, lifespan=lifespan)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"status": "error", "kind": "validation", "message": _describe_validation_error(exc)},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        error = InternalError("Internal server error")
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", service=SERVICE_NAME, version=SERVICE_VERSION)

    app.include_router(routes.products_router)
    app.include_router(routes.carts_router)
    app.include_router(views.router)
    app.include_router(feed_module.router)

    return app


settings = Settings()
setup_logging(SERVICE_NAME, level=settings.log_level)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.store_service_port)
