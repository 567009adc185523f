"""REST API for server-rendered report exports."""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from sqlaudit.export.serializer import ExportFormat, build_payload
from sqlaudit.report.loader import load_report_from_string

logger = logging.getLogger(__name__)

router = APIRouter(tags=["exports"])


@router.post("/report/export/{fmt}")
async def export_report(fmt: str, request: Request):
    try:
        export_format = ExportFormat(fmt.lower())
    except ValueError:
        return JSONResponse(
            status_code=400,
            content={"error": f"Unsupported export format: {fmt}"},
        )

    body = await request.body()
    if not body.strip():
        return JSONResponse(
            status_code=400,
            content={"error": "No report to export; run a scan first"},
        )

    try:
        report = load_report_from_string(body.decode("utf-8"))
    except (ValueError, TypeError) as e:
        logger.warning("Rejected malformed export request: %s", e)
        return JSONResponse(
            status_code=400,
            content={"error": f"Malformed report: {e}"},
        )

    payload = build_payload(export_format, report)
    disposition = (
        f'attachment; filename="{payload.filename}"; '
        f"filename*=UTF-8''{quote(payload.filename)}"
    )
    return Response(
        content=payload.content,
        media_type=payload.media_type,
        headers={"Content-Disposition": disposition},
    )
