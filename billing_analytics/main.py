"""
Billing Analytics — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from billing_analytics import __version__
from billing_analytics.data.store import DataStore
from billing_analytics.api.dependencies import set_store
from billing_analytics.api.router_meta import router as meta_router
from billing_analytics.api.router_queries import router as queries_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load all data at startup."""
    from billing_analytics.config import DATA_FOLDER

    # The CLI may point BILLING_DATA_DIR elsewhere after config was imported
    data_dir = Path(os.environ.get("BILLING_DATA_DIR", str(DATA_FOLDER)))
    print(f"  BILLING_DATA_DIR = {data_dir} (exists = {data_dir.exists()})")
    store = DataStore().load(data_dir)
    set_store(store)

    counts = store.row_counts()
    print(f"\nBilling Analytics ready — {counts['customers']:,} customers, "
          f"{counts['services']:,} services, {counts['transactions']:,} transactions "
          f"(source: {store.source})\n")
    yield
    set_store(None)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Billing Analytics API",
        description="Telecom billing joins and window analytics — customers, services, transactions",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(queries_router)
    return app


app = create_app()
