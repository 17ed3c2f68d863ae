"""Parcelbridge FastAPI application.

Courier booking service: registers storefront orders, resolves their
destination cities against the LCS directory and books consignments.
Every request runs inside the shipping domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Logging and domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from shipping.domain import shipping  # noqa: E402
from shipping.utils.logging import configure_logging

configure_logging()
shipping.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Parcelbridge API",
    description="Courier booking — LCS city resolution and consignment booking",
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
    """Push the shipping domain context for each request."""
    with shipping.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from shipping.api import courier_router, order_router  # noqa: E402

app.include_router(courier_router)
app.include_router(order_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    from shipping.courier.settings import get_settings

    settings = get_settings()
    return JSONResponse(
        content={
            "status": "ok",
            "domain": shipping.name,
            "courier": {
                "provider": "lcs",
                "configured": settings.has_credentials,
                "production": settings.is_production,
            },
        }
    )
