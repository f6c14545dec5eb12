"""
Meta endpoints: health, regions, query listing.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from billing_analytics.data.store import DataStore
from billing_analytics.api.dependencies import get_store
from billing_analytics.api.response_models import (
    ColumnInfo, HealthResponse, QueryInfo, QueryListResponse, RegionsResponse,
)
from billing_analytics.reports.catalog import QUERIES, QuerySpec

router = APIRouter(prefix="/api", tags=["meta"])


def query_info(spec: QuerySpec) -> QueryInfo:
    return QueryInfo(
        name=spec.name,
        title=spec.title,
        description=spec.description,
        columns=[ColumnInfo(key=k, type=t, label=l) for k, t, l in spec.columns],
    )


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store)):
    counts = store.row_counts()
    return HealthResponse(
        status="ok",
        source=store.source,
        customers=counts["customers"],
        services=counts["services"],
        transactions=counts["transactions"],
        date_range=store.date_range(),
        warnings=store.warnings,
    )


@router.get("/regions", response_model=RegionsResponse)
def list_regions(store: DataStore = Depends(get_store)):
    return RegionsResponse(regions=store.regions())


@router.get("/queries", response_model=QueryListResponse)
def list_queries():
    infos = [query_info(spec) for spec in QUERIES.values()]
    return QueryListResponse(queries=infos, count=len(infos))
