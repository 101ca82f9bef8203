from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from .services.report import ReportService

cors = CORS()


def init_extensions(app: Flask) -> None:
    cors.init_app(app, resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})
    app.extensions["report_service"] = ReportService.from_config(app.config)


def report_service(app: Flask) -> ReportService:
    return app.extensions["report_service"]
