from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class CanonicalRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="", alias="Name")
    address: str = Field(default="", alias="Address")
    postcode: str = Field(default="", alias="Postcode")
    phone: str = Field(default="", alias="Phone")
    credit_limit: str = Field(default="0.00", alias="Credit Limit")
    birthday: str = Field(default="", alias="Birthday")


class ReportSummary(BaseModel):
    rows: Optional[int] = Field(default=None, examples=[7])
    columns: Optional[int] = Field(default=None, examples=[6])
    warnings: int = 0
    errors: int = 0
    deterministic: bool = True


class ReportItem(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class ConversionReport(BaseModel):
    summary: ReportSummary
    normalizations: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[ReportItem] = Field(default_factory=list)
    errors: List[ReportItem] = Field(default_factory=list)


class NormalizeResponse(BaseModel):
    records: List[CanonicalRecord]
    report: ConversionReport

class HealthResponse(BaseModel):
    ok: bool = True
