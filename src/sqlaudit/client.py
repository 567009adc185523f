"""Async HTTP client for the audit service API.

Uploads are validated locally (extension, size) before any request is made.
Non-success responses raise TransportError carrying the server's ``error``
message when it sent one.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from sqlaudit.config import SqlAuditConfig
from sqlaudit.errors import TransportError, ValidationError
from sqlaudit.report.loader import load_report, parse_rules, report_to_dict
from sqlaudit.report.models import Rule, ScanReport

logger = logging.getLogger(__name__)

# Upload limit enforced by the service (10 MB)
MAX_UPLOAD_BYTES = 10 * 1024 * 1024

RULES_EXTENSION = ".docx"
SQL_EXTENSION = ".sql"


def validate_upload(path: str | Path, extension: str) -> Path:
    """Check an upload candidate before it leaves the machine."""
    path = Path(path)
    if not path.name.lower().endswith(extension):
        if extension == RULES_EXTENSION:
            raise ValidationError("Please upload a Word document in .docx format")
        raise ValidationError(f"Please upload a {extension} file")
    try:
        size = path.stat().st_size
    except OSError as e:
        raise ValidationError(f"Cannot read {path}: {e.strerror or e}") from e
    if size > MAX_UPLOAD_BYTES:
        raise ValidationError(
            f"{path.name} is {size / 1024 / 1024:.1f} MB; the limit is 10 MB"
        )
    return path


def validate_repo_path(repo_path: str | None) -> str:
    repo_path = (repo_path or "").strip()
    if not repo_path:
        raise ValidationError("Please enter a repository path")
    return repo_path


def error_from_response(response: httpx.Response, fallback: str) -> TransportError:
    """Build a TransportError from a non-success response."""
    message = fallback
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        message = str(body["error"])
    return TransportError(message, status_code=response.status_code)


class AuditClient:
    """Thin async wrapper over the audit service endpoints."""

    def __init__(
        self,
        config: SqlAuditConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or SqlAuditConfig.load()
        self._client = client or httpx.AsyncClient(
            base_url=self._config.server_url,
            timeout=self._config.timeout,
        )

    @property
    def http(self) -> httpx.AsyncClient:
        return self._client

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> AuditClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def scan(self, repo_path: str) -> ScanReport:
        """Scan a repository path on the service host."""
        repo_path = validate_repo_path(repo_path)
        logger.info("Requesting scan of %s", repo_path)
        data = await self._request(
            "POST", "/api/scan", "Scan failed", json={"repoPath": repo_path}
        )
        return _decode(load_report, data, "Scan failed")

    async def scan_sql(self, path: str | Path) -> ScanReport:
        """Upload a single .sql script for review."""
        path = validate_upload(path, SQL_EXTENSION)
        logger.info("Uploading SQL script %s", path)
        data = await self._request(
            "POST",
            "/api/scan/sql",
            "SQL script review failed",
            files={"file": (path.name, path.read_bytes(), "application/sql")},
        )
        return _decode(load_report, data, "SQL script review failed")

    async def get_rules(self) -> list[Rule]:
        data = await self._request("GET", "/api/rules", "Failed to load rules")
        return _decode(parse_rules, data, "Failed to load rules")

    async def get_default_rules(self) -> list[Rule]:
        data = await self._request("GET", "/api/rules/default", "Failed to load rules")
        return _decode(parse_rules, data, "Failed to load rules")

    async def upload_rules(self, path: str | Path) -> str:
        """Upload a Word rule document; returns the service's message."""
        path = validate_upload(path, RULES_EXTENSION)
        data = await self._request(
            "POST",
            "/api/rules/upload",
            "Upload failed",
            files={
                "file": (
                    path.name,
                    path.read_bytes(),
                    "application/vnd.openxmlformats-officedocument"
                    ".wordprocessingml.document",
                ),
            },
        )
        return str(data.get("message", "")) if isinstance(data, dict) else ""

    async def clear_custom_rules(self) -> None:
        await self._request("DELETE", "/api/rules/custom", "Failed to clear rules")

    async def render_export(self, fmt: str, report: ScanReport) -> httpx.Response:
        """POST a report to the render endpoint; returns the raw success response."""
        try:
            response = await self._client.post(
                f"/api/report/export/{fmt}",
                json=report_to_dict(report),
            )
        except httpx.HTTPError as e:
            raise TransportError(f"Export request failed: {e}") from e
        if not response.is_success:
            raise error_from_response(response, "Export failed")
        return response

    async def _request(self, method: str, url: str, fallback: str, **kwargs):
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{fallback}: {e}") from e
        if not response.is_success:
            raise error_from_response(response, fallback)
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"{fallback}: malformed response") from e


def _decode(parse, data, fallback: str):
    try:
        return parse(data)
    except (ValueError, TypeError) as e:
        raise TransportError(f"{fallback}: malformed response ({e})") from e
