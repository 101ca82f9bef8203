from __future__ import annotations

import fitz

from scorecard import create_app
from template_builder import SAMPLE_PAYLOAD


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_render_returns_pdf_attachment(client):
    response = client.post("/api/reports/render", json=SAMPLE_PAYLOAD)

    assert response.status_code == 200
    assert response.mimetype == "application/pdf"
    assert "dominance-scorecard-report.pdf" in response.headers["Content-Disposition"]

    doc = fitz.open(stream=response.data, filetype="pdf")
    try:
        assert doc.page_count == 7
        assert [link["uri"] for link in doc[6].get_links()] == ["https://example.test/audit"]
    finally:
        doc.close()


def test_render_rejects_invalid_payload(client):
    response = client.post("/api/reports/render", json={**SAMPLE_PAYLOAD, "total_score": 140})
    assert response.status_code == 400
    assert response.get_json() == {"error": "total_score must be between 0 and 100"}


def test_render_rejects_non_object_body(client):
    response = client.post("/api/reports/render", data="[]", content_type="application/json")
    assert response.status_code == 400
    assert response.get_json() == {"error": "Invalid payload"}


def test_render_failure_is_generic(tmp_path, fonts_dir):
    app = create_app("testing", {"TEMPLATE_PATH": tmp_path / "missing.pdf", "FONTS_DIR": fonts_dir})
    response = app.test_client().post("/api/reports/render", json=SAMPLE_PAYLOAD)

    assert response.status_code == 500
    assert response.get_json() == {"error": "Report generation failed"}


def test_unknown_route_is_json_404(client):
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.get_json() == {"error": "Not found"}
