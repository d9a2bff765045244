"""
Zip bundling of base64-encoded PDFs.

Entries are independent: one that cannot be decoded is skipped and logged,
and the archive is still finalized with the rest.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import zipfile
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError as SchemaError

from loi_service.errors import ArchiveError
from loi_service.schemas import ZipEntry

logger = logging.getLogger(__name__)

ARCHIVE_FILENAME = "LOI_Batch.zip"
COMPRESS_LEVEL = 9


@dataclass(frozen=True)
class SkippedEntry:
    position: int
    reason: str


@dataclass
class ArchiveResult:
    content: bytes
    written: List[str] = field(default_factory=list)
    skipped: List[SkippedEntry] = field(default_factory=list)


def default_entry_name(position: int) -> str:
    return f"LOI_{position}.pdf"


def decode_entry(raw: Any) -> Tuple[ZipEntry, bytes]:
    """
    Validate one entry and decode its payload.

    Raises ValueError when the entry has no string `data` or the data is not base64.
    """
    try:
        entry = ZipEntry.model_validate(raw)
    except SchemaError as e:
        raise ValueError("entry must be an object with a string 'data' field") from e
    try:
        payload = base64.b64decode(entry.data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"invalid base64 data: {e}") from e
    return entry, payload


def _entry_name(entry: ZipEntry, position: int) -> str:
    name: Optional[str] = entry.filename.strip() if entry.filename else None
    return name or default_entry_name(position)


def build_zip(entries: List[Any]) -> ArchiveResult:
    """Deflate every decodable entry into one archive, in input order (positions are 1-indexed)."""
    if not isinstance(entries, list):
        raise ArchiveError("pdfs array required")

    result = ArchiveResult(content=b"")
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=COMPRESS_LEVEL) as zf:
            for position, raw in enumerate(entries, start=1):
                try:
                    entry, payload = decode_entry(raw)
                except ValueError as e:
                    logger.warning(
                        "skipping zip entry %d: %s", position, e, extra={"position": position, "reason": str(e)}
                    )
                    result.skipped.append(SkippedEntry(position=position, reason=str(e)))
                    continue
                name = _entry_name(entry, position)
                zf.writestr(name, payload)
                result.written.append(name)
    except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
        logger.exception("zip stream failed")
        raise ArchiveError("Failed to create ZIP", details=str(e)) from e

    result.content = buffer.getvalue()
    logger.info(
        "zip built",
        extra={"written": len(result.written), "skipped": len(result.skipped), "bytes": len(result.content)},
    )
    return result
