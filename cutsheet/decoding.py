"""
Upload decoding: turn the uploaded bytes into the text the reshaper works on.

Rules:
- Cut sheet exports are expected to be UTF-8; a leading BOM is dropped.
- If the bytes are not valid UTF-8, use charset-normalizer's best guess
  (Spanish Excel exports are often cp1252).
- If that fails too, decode UTF-8 with replacement characters and report it.
- Line terminators are left untouched; the reshaper splits them itself.
"""

from __future__ import annotations

import codecs
import logging
from typing import Any, Dict, Tuple

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)


def decode_upload(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    bom = raw.startswith(codecs.BOM_UTF8)
    detected = None
    decode_used = "utf-8-sig" if bom else "utf-8"
    decode_fallback = False

    try:
        text = raw.decode(decode_used)
    except UnicodeDecodeError:
        match = from_bytes(raw).best()
        if match is not None:
            detected = match.encoding

        text = None
        if detected is not None:
            try:
                text = raw.decode(detected)
                decode_used = detected
            except (LookupError, UnicodeDecodeError):
                logger.warning("detected encoding %s could not decode the upload", detected)

        if text is None:
            # Last resort: decode with replacement so the reshape can still run
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"
            decode_fallback = True

        logger.info("upload is not UTF-8; decoded as %s (detected=%s)", decode_used, detected)

    report = {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
        "bom": bom,
    }
    return text, report
