"""
Bytes-in / envelope-out glue between the HTTP surface and the reshaper.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from typing import Any, Dict, Optional, Tuple

from .config import Settings
from .decoding import decode_upload
from .errors import EmptyFile, FileTooLarge, UnsupportedFile
from .reshape import ReshapeResult, reshape_table

logger = logging.getLogger(__name__)


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def check_upload(filename: Optional[str], raw: bytes, settings: Settings) -> None:
    allowed = settings.allowed_extensions_list
    if not filename or not filename.lower().endswith(tuple(allowed)):
        raise UnsupportedFile(filename, allowed)
    if len(raw) > settings.max_upload_bytes:
        raise FileTooLarge(len(raw), settings.max_upload_bytes)
    if not raw:
        raise EmptyFile(filename)


def reshape_bytes(raw: bytes, settings: Settings) -> Tuple[bytes, ReshapeResult, Dict[str, Any]]:
    """Decode, reshape and encode. ReshapeError propagates untouched."""
    text, encoding_report = decode_upload(raw)
    result = reshape_table(text)
    return result.to_csv().encode(settings.output_encoding), result, encoding_report


def _warnings(result: ReshapeResult, encoding_report: Dict[str, Any]) -> list[str]:
    warnings = []
    if encoding_report["decode_fallback"]:
        warnings.append("Input was not valid text in any detected encoding; undecodable bytes were replaced")
    if not result.records:
        warnings.append("Header found but no data rows produced records")
    if result.stats.skipped_no_key:
        warnings.append(
            f"{result.stats.skipped_no_key} row(s) skipped: no date or line to carry forward"
        )
    return warnings


def reshape_csv_bytes(raw: bytes, settings: Settings) -> Dict[str, Any]:
    """
    Returns a dict matching the API's response envelope.
    """
    reshaped, result, encoding_report = reshape_bytes(raw, settings)
    stats = result.stats

    return {
        "reshaped_csv": {
            "filename": settings.download_filename,
            "sha256": _sha256_hex(reshaped),
            "encoding": settings.output_encoding,
            "content_b64": base64.b64encode(reshaped).decode("ascii"),
        },
        "report": {
            "summary": {
                "delimiter": result.delimiter,
                "header_row": result.header_index + 1,
                "operators": [{"name": op.name, "column": op.index} for op in result.operators],
                "rows_seen": stats.rows_seen,
                "records": len(result.records),
                "skipped_short_rows": stats.skipped_short,
                "skipped_total_rows": stats.skipped_total,
                "skipped_rows_without_key": stats.skipped_no_key,
            },
            "encoding": encoding_report,
            "warnings": _warnings(result, encoding_report),
        },
    }
