"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    source: str
    customers: int
    services: int
    transactions: int
    date_range: str
    warnings: list[str]


class RegionsResponse(BaseModel):
    regions: list[str]


class ColumnInfo(BaseModel):
    key: str
    type: str
    label: str


class QueryInfo(BaseModel):
    name: str
    title: str
    description: str
    columns: list[ColumnInfo]


class QueryListResponse(BaseModel):
    queries: list[QueryInfo]
    count: int


class QueryResult(BaseModel):
    name: str
    title: str
    period: Optional[str] = None
    columns: list[ColumnInfo]
    rows: list[dict[str, Any]]
    row_count: int
