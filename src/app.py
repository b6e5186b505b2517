"""Bakery FastAPI application.

Point-of-sale back office: product prices, discounts and counter orders.
Commands are processed synchronously via HTTP, each request wrapped in the
bakery domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from src/bakery/domain.toml.
from bakery.domain import bakery  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bakery.config import get_settings

bakery.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Bakery API",
    description="Bakery point of sale: order pricing, product prices and discounts",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the bakery domain context for each request."""
    with bakery.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from bakery.api import (  # noqa: E402
    discount_router,
    order_router,
    product_price_router,
    register_exception_handlers,
)

register_exception_handlers(app)
app.include_router(order_router)
app.include_router(product_price_router)
app.include_router(discount_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    settings = get_settings()
    return JSONResponse(
        content={
            "status": "ok",
            "bakery": {
                "name": bakery.name,
                "store": settings.store_name,
                "env": settings.env,
            },
        }
    )
