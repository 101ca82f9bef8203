from __future__ import annotations

import io
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request, send_file

from ..extensions import report_service
from ..services.scoring import ScorecardData
from ..utils.exceptions import InvalidScorecardData, ReportGenerationFailed

bp = Blueprint("reports", __name__)


def init_app(api_bp: Blueprint) -> None:
    api_bp.register_blueprint(bp)


@bp.get("/health")
def health():
    return jsonify({"status": "ok"})


@bp.post("/reports/render")
def render_report():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid payload"}), HTTPStatus.BAD_REQUEST

    try:
        data = ScorecardData.from_payload(payload)
    except InvalidScorecardData as exc:
        return jsonify({"error": str(exc)}), HTTPStatus.BAD_REQUEST

    try:
        pdf_bytes = report_service(current_app).render(data)
    except ReportGenerationFailed as exc:
        return jsonify({"error": str(exc)}), HTTPStatus.INTERNAL_SERVER_ERROR

    current_app.logger.info(f"Rendered report for tier {data.resolved_tier().key} ({len(pdf_bytes)} bytes)")
    return send_file(
        io.BytesIO(pdf_bytes),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=current_app.config["REPORT_FILENAME"],
    )
