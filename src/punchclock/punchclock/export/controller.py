from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_period
from ..common.http import api_errors
from ..container import Container
from ..core.enums import Location
from .service import ExportFormat, ExportKind


def register(app: Flask, container: Container) -> None:
    @app.route("/api/export", methods=["GET"], endpoint="export")
    @api_errors
    def export():
        start, end = parse_period(request.args.get("range", ""))
        position = request.args.get("position")
        result = container.export_service.export(
            start,
            end,
            fmt=ExportFormat.from_name(request.args.get("format", "csv")),
            kind=ExportKind.from_name(request.args.get("kind", "events")),
            location=Location.from_code(position) if position else None,
        )
        return app.response_class(
            result.content,
            mimetype=result.mimetype,
            headers={"Content-Disposition": f"attachment; filename={result.filename}"},
        )
