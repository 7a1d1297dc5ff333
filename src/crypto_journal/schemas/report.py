"""Schemas for exported trade reports."""

from datetime import date

from pydantic import BaseModel, Field


class TradeReport(BaseModel):
    """Tabular P&L report, ready for CSV or any other renderer."""

    title: str = Field(..., description="Report heading")
    generated_on: date = Field(..., description="Date the report was produced")
    summary_lines: list[str] = Field(..., description="Formatted headline figures")
    columns: list[str] = Field(..., description="Table header")
    rows: list[list[str]] = Field(..., description="One formatted row per trade")
