"""
Query endpoints — run a catalog query as JSON rows or as a text table.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from billing_analytics.analytics.common import sanitize_for_json
from billing_analytics.api.dependencies import get_store, parse_period
from billing_analytics.api.response_models import ColumnInfo, QueryResult
from billing_analytics.data.schemas import PeriodFilter
from billing_analytics.data.store import DataStore
from billing_analytics.errors import UnknownQueryError
from billing_analytics.reports.catalog import QuerySpec, get_query
from billing_analytics.reports.text import render_table

router = APIRouter(prefix="/api/queries", tags=["queries"])


def _lookup(name: str) -> QuerySpec:
    try:
        return get_query(name)
    except UnknownQueryError as exc:
        raise HTTPException(404, str(exc))


@router.get("/{name}", response_model=QueryResult)
def run_query_json(
    name: str,
    store: DataStore = Depends(get_store),
    period: PeriodFilter | None = Depends(parse_period),
):
    spec = _lookup(name)
    df = spec.run(store, period)
    keys = [k for k, _, _ in spec.columns]
    rows = sanitize_for_json(df[keys].to_dict("records"))
    return QueryResult(
        name=spec.name,
        title=spec.title,
        period=period.label if period else None,
        columns=[ColumnInfo(key=k, type=t, label=l) for k, t, l in spec.columns],
        rows=rows,
        row_count=len(rows),
    )


@router.get("/{name}/text", response_class=PlainTextResponse)
def run_query_text(
    name: str,
    store: DataStore = Depends(get_store),
    period: PeriodFilter | None = Depends(parse_period),
):
    spec = _lookup(name)
    return render_table(spec.columns, spec.run(store, period))
