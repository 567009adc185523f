"""Export delivery — server-rendered document first, local serializer as fallback.

A remote failure is never shown to the user: it is logged and the same
document is produced locally. Only when the local path fails as well does the
caller see an ExportError.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote

from sqlaudit.client import AuditClient
from sqlaudit.errors import ExportError, TransportError
from sqlaudit.export.serializer import (
    ExportFormat,
    build_payload,
    default_filename,
)
from sqlaudit.report.models import ScanReport

logger = logging.getLogger(__name__)

_EXTENDED_FILENAME = re.compile(r"filename\*\s*=\s*([^;]+)", re.IGNORECASE)
_QUOTED_FILENAME = re.compile(r'(?<![\w*])filename\s*=\s*"([^"]*)"', re.IGNORECASE)
_PLAIN_FILENAME = re.compile(r"(?<![\w*])filename\s*=\s*([^;\s]+)", re.IGNORECASE)
# RFC 5987 prefix: charset'language'
_CHARSET_PREFIX = re.compile(r"^([\w!#$%&+^`{}~-]*)'[^']*'")


@dataclass(frozen=True)
class ExportResult:
    """Where an export landed and which path produced it."""

    path: Path
    filename: str
    via_fallback: bool


def filename_from_disposition(header: str | None) -> str | None:
    """Extract a download filename from a Content-Disposition value.

    The extended ``filename*=UTF-8''...`` form wins and is percent-decoded with
    quote characters stripped; otherwise a ``filename="..."`` value is used
    verbatim. Returns None when neither is present.
    """
    if not header:
        return None

    match = _EXTENDED_FILENAME.search(header)
    if match:
        value = match.group(1).strip()
        charset = "utf-8"
        prefix = _CHARSET_PREFIX.match(value.strip("\"'"))
        if prefix:
            charset = prefix.group(1) or charset
            value = value.strip("\"'")[prefix.end() :]
        try:
            decoded = unquote(value, encoding=charset, errors="strict")
        except (LookupError, UnicodeDecodeError):
            decoded = unquote(value)
        decoded = decoded.replace('"', "").replace("'", "")
        if decoded:
            return decoded

    match = _QUOTED_FILENAME.search(header)
    if match:
        return match.group(1)

    match = _PLAIN_FILENAME.search(header)
    if match:
        return match.group(1)
    return None


class ExportTransport:
    """Downloads a report export, rendering remotely when the service allows."""

    def __init__(self, client: AuditClient, download_dir: str | Path) -> None:
        self._client = client
        self._download_dir = Path(download_dir)

    async def export(self, fmt: ExportFormat | str, report: ScanReport) -> ExportResult:
        fmt = ExportFormat(fmt)
        try:
            filename, content = await self._fetch_remote(fmt, report)
            path = self._save(filename, content)
        except (TransportError, OSError) as e:
            logger.warning(
                "Remote %s export failed, exporting via fallback: %s", fmt.value, e
            )
        else:
            logger.info("Exported %s report to %s", fmt.value, path)
            return ExportResult(path=path, filename=path.name, via_fallback=False)

        try:
            payload = build_payload(fmt, report)
            path = self._save(payload.filename, payload.content)
        except (OSError, ValueError, TypeError) as e:
            logger.error("Local %s export failed: %s", fmt.value, e)
            raise ExportError(f"Export failed: {e}") from e

        logger.info("Exported %s report via fallback to %s", fmt.value, path)
        return ExportResult(path=path, filename=path.name, via_fallback=True)

    async def _fetch_remote(
        self, fmt: ExportFormat, report: ScanReport
    ) -> tuple[str, bytes]:
        response = await self._client.render_export(fmt.value, report)
        content = response.content
        if not content:
            raise TransportError("Empty export response", status_code=response.status_code)
        filename = filename_from_disposition(
            response.headers.get("content-disposition")
        )
        return filename or default_filename(fmt), content

    def _save(self, filename: str, content: bytes) -> Path:
        """Write a download into the download directory without clobbering."""
        name = Path(filename.replace("\\", "/")).name
        if name in ("", ".", ".."):
            name = "sql-audit-report"
        self._download_dir.mkdir(parents=True, exist_ok=True)

        path = self._download_dir / name
        stem, suffix = path.stem, path.suffix
        counter = 1
        while path.exists():
            path = self._download_dir / f"{stem} ({counter}){suffix}"
            counter += 1

        path.write_bytes(content)
        return path
