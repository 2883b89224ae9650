"""Sales figures shown on the dashboard. Computed on demand, never stored."""

from datetime import date

from pydantic import BaseModel, Field


class RevenuePoint(BaseModel):
    """Revenue invoiced on one calendar day (UTC)."""

    day: date
    amount: float


class SalesStats(BaseModel):
    """Aggregate figures over a set of invoices."""

    total_revenue: float = 0.0
    invoice_count: int = 0
    paid_count: int = 0
    pending_count: int = 0
    daily_revenue: list[RevenuePoint] = Field(default_factory=list)
