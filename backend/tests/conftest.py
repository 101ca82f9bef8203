from __future__ import annotations

from pathlib import Path

import fitz
import pytest

from scorecard import create_app
from scorecard.services.report.drawing import FONT_FILES, FontLibrary
from scorecard.services.report.font_metrics import KNOWN_FONTS
from template_builder import REFERENCE_PAGES, build_template


@pytest.fixture(scope="session")
def stand_in_font() -> bytes:
    return fitz.Font("helv").buffer


@pytest.fixture
def font_library(stand_in_font) -> FontLibrary:
    return FontLibrary({identity: stand_in_font for identity in KNOWN_FONTS})


@pytest.fixture(scope="session")
def reference_template() -> bytes:
    return build_template(REFERENCE_PAGES)


@pytest.fixture
def fonts_dir(tmp_path: Path, stand_in_font) -> Path:
    directory = tmp_path / "fonts"
    directory.mkdir()
    for filename in FONT_FILES.values():
        (directory / filename).write_bytes(stand_in_font)
    return directory


@pytest.fixture
def template_path(tmp_path: Path, reference_template) -> Path:
    path = tmp_path / "dominance-playbook.pdf"
    path.write_bytes(reference_template)
    return path


@pytest.fixture
def app(template_path, fonts_dir):
    return create_app(
        "testing",
        {
            "TEMPLATE_PATH": template_path,
            "FONTS_DIR": fonts_dir,
            "CTA_URL": "https://example.test/audit",
        },
    )


@pytest.fixture
def client(app):
    return app.test_client()
