# storefront/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from storefront.api.routers import (
    addresses,
    carts,
    categories,
    health,
    orders,
    payment_methods,
    products,
    users,
)
from storefront.data.database import Base, init_db
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database")
    try:
        init_db()
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info(f"Tables ready: {sorted(Base.metadata.tables)}")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(categories.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(addresses.router)
    app.include_router(payment_methods.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
