from __future__ import annotations

import pytest

from scorecard.services.report.font_metrics import (
    DEFAULT_METRICS,
    FONT_TABLES,
    FontMetrics,
    TextMetrics,
    metrics_from_font_buffer,
    resolve_font_identity,
    text_width,
    wrap_text,
)

SENTENCE = (
    "Customers can't choose you if they can't find you. Low visibility in local search and "
    "maps means you're losing leads to competitors who show up first."
)


@pytest.mark.parametrize("font", sorted(FONT_TABLES))
def test_width_grows_with_text(font):
    shorter = text_width("Local", font, 12)
    longer = text_width("Local Visibility", font, 12)
    assert 0 < shorter < longer


def test_width_scales_linearly_with_size():
    assert text_width("Growth Ready", "Roboto-Bold", 24) == pytest.approx(
        2 * text_width("Growth Ready", "Roboto-Bold", 12)
    )


def test_unknown_font_uses_half_em_per_character():
    assert text_width("abcd", "Comic-Sans", 10) == pytest.approx(20)


def test_out_of_range_character_uses_default_width():
    table = FONT_TABLES["Roboto-Regular"]
    assert table.advance("—") == table.default_width
    assert table.advance("\x01") == table.default_width


def test_zero_width_entry_uses_default_width():
    table = FontMetrics(first_char=32, last_char=34, default_width=400, widths=(250, 0, 600))
    assert table.advance(" ") == 250
    assert table.advance("!") == 400
    assert table.advance('"') == 600


@pytest.mark.parametrize("max_width", [80, 200, 450])
def test_wrap_covers_every_word_in_order(max_width):
    lines = wrap_text(SENTENCE, "Roboto-Regular", 14, max_width)
    assert " ".join(lines).split() == SENTENCE.split()
    for line in lines:
        if len(line.split()) > 1:
            assert text_width(line, "Roboto-Regular", 14) <= max_width


def test_wrap_keeps_an_overlong_word_alone():
    lines = wrap_text("a Supercalifragilistic b", "Roboto-Bold", 20, 40)
    assert lines == ["a", "Supercalifragilistic", "b"]


def test_wrap_of_blank_text_is_empty():
    assert wrap_text("   ", "Roboto-Regular", 12, 100) == []


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        DEFAULT_METRICS._tables["Roboto-Regular"] = None  # type: ignore[index]


def test_metrics_from_font_buffer_and_overrides(stand_in_font):
    measured = metrics_from_font_buffer(stand_in_font)
    assert measured.first_char == 32
    assert measured.advance("W") > measured.advance("i") > 0

    metrics = DEFAULT_METRICS.with_tables({"Roboto-Bold": measured})
    assert isinstance(metrics, TextMetrics)
    assert metrics.width("Wi", "Roboto-Bold", 1000) == pytest.approx(measured.advance("W") + measured.advance("i"))
    assert DEFAULT_METRICS.width("Wi", "Roboto-Bold", 10) == text_width("Wi", "Roboto-Bold", 10)


def test_resolve_font_identity_prefers_first_listed_name():
    assert resolve_font_identity("ABCDEF+Roboto-Medium") == "Roboto-Medium"
    assert resolve_font_identity("Archivo-ExtraBold") == "Archivo-ExtraBold"
    assert resolve_font_identity("Archivo-Bold") == "Archivo-Bold"
    assert resolve_font_identity("Times-Roman") is None
