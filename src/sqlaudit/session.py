"""Audit session — single owner of the current report and its view state."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlaudit.clipboard import ClipboardService, CopyOutcome
from sqlaudit.client import (
    SQL_EXTENSION,
    AuditClient,
    validate_repo_path,
    validate_upload,
)
from sqlaudit.errors import ValidationError
from sqlaudit.export.serializer import ExportFormat
from sqlaudit.export.transport import ExportResult, ExportTransport
from sqlaudit.report import state as transitions
from sqlaudit.report.grouping import SeverityFilter
from sqlaudit.report.models import ScanReport
from sqlaudit.report.pagination import PageView
from sqlaudit.report.state import ViewState

logger = logging.getLogger(__name__)


class AuditSession:
    """Runs scans and applies view transitions one whole state at a time.

    Only one scan may be in flight. Clearing the session while a scan runs
    abandons it: the response is dropped when it arrives.
    """

    def __init__(
        self,
        client: AuditClient,
        transport: ExportTransport | None = None,
        clipboard: ClipboardService | None = None,
        download_dir: str | Path = ".",
    ) -> None:
        self._client = client
        self._transport = transport or ExportTransport(client, download_dir)
        self._clipboard = clipboard or ClipboardService()
        self._state = ViewState()
        self._generation = 0
        self._scanning = False

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def scanning(self) -> bool:
        return self._scanning

    async def scan(self, repo_path: str) -> bool:
        """Scan a repository; returns False if the result arrived stale.

        Rejected input raises ValidationError and leaves the current view alone.
        """
        repo_path = validate_repo_path(repo_path)
        token = self._begin_scan()
        try:
            report = await self._client.scan(repo_path)
        finally:
            self._end_scan(token)
        return self._accept(token, report)

    async def scan_sql(self, path: str | Path) -> bool:
        path = validate_upload(path, SQL_EXTENSION)
        token = self._begin_scan()
        try:
            report = await self._client.scan_sql(path)
        finally:
            self._end_scan(token)
        return self._accept(token, report)

    def load(self, report: ScanReport) -> None:
        """Install a report obtained elsewhere (e.g. a saved JSON export)."""
        self._generation += 1
        self._scanning = False
        self._state = transitions.load(self._state, report)

    def set_filter(self, severity_filter: SeverityFilter) -> None:
        self._state = transitions.change_filter(self._state, severity_filter)

    def show_more(self) -> None:
        self._state = transitions.advance_page(self._state)

    def clear(self) -> None:
        self._generation += 1
        self._scanning = False
        self._state = transitions.clear(self._state)

    def visible(self) -> PageView:
        return transitions.visible(self._state)

    async def export(self, fmt: ExportFormat | str) -> ExportResult:
        if self._state.report is None:
            raise ValidationError("No report to export; run a scan first")
        return await self._transport.export(fmt, self._state.report)

    def copy(self, text: str | None) -> CopyOutcome:
        return self._clipboard.copy(text)

    def _begin_scan(self) -> int:
        if self._scanning:
            raise ValidationError("A scan is already running")
        self._generation += 1
        self._scanning = True
        self._state = transitions.clear(self._state)
        return self._generation

    def _end_scan(self, token: int) -> None:
        if token == self._generation:
            self._scanning = False

    def _accept(self, token: int, report: ScanReport) -> bool:
        if token != self._generation:
            logger.debug("Dropping stale scan result (generation %d)", token)
            return False
        self._state = transitions.load(self._state, report)
        logger.info(
            "Scan complete: %d files, %d violations",
            report.total_files,
            report.total_violations,
        )
        return True
