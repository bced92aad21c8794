from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field


class ReshapedCsv(BaseModel):
    filename: str
    sha256: str
    encoding: str = Field(default="utf-8")
    content_b64: str


class OperatorInfo(BaseModel):
    name: str
    column: int


class ReportSummary(BaseModel):
    delimiter: str
    header_row: int = Field(description="1-based line number of the detected header")
    operators: List[OperatorInfo] = Field(default_factory=list)
    rows_seen: int = 0
    records: int = 0
    skipped_short_rows: int = 0
    skipped_total_rows: int = 0
    skipped_rows_without_key: int = 0


class EncodingReport(BaseModel):
    detected: Optional[str] = None
    decode_used: str
    decode_fallback: bool = False
    bom: bool = False


class ReshapeReport(BaseModel):
    summary: ReportSummary
    encoding: EncodingReport
    warnings: List[str] = Field(default_factory=list)


class ReshapeResponse(BaseModel):
    reshaped_csv: ReshapedCsv
    report: ReshapeReport


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: Optional[dict] = None


class HealthResponse(BaseModel):
    ok: bool = True
