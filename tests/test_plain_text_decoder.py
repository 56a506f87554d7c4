"""
Unit tests for ADF to plain text decoding.
"""
import pytest

from ticket_forge.models.adf import Document, Paragraph, Text
from ticket_forge.services.markdown_encoder import markdown_to_adf
from ticket_forge.services.plain_text_decoder import adf_to_plain_text


def _paragraph(*texts):
    return {"type": "paragraph", "content": [{"type": "text", "text": t} for t in texts]}


def _doc(*blocks):
    return {"type": "doc", "version": 1, "content": list(blocks)}


def test_none_decodes_to_empty_string():
    assert adf_to_plain_text(None) == ""


def test_plain_string_passes_through_unchanged():
    assert adf_to_plain_text("  already plain  ") == "  already plain  "


@pytest.mark.parametrize("text", [
    "Single line",
    "First line\nSecond line\nThird line",
    "  Leading and trailing whitespace  ",
])
def test_plain_text_round_trip(text):
    assert adf_to_plain_text(markdown_to_adf(text)) == text.strip()


def test_paragraphs_are_separated_by_one_newline():
    document = _doc(_paragraph("a"), {"type": "paragraph", "content": []}, _paragraph("b"))

    assert adf_to_plain_text(document) == "a\nb"


def test_text_runs_in_a_paragraph_are_concatenated():
    document = _doc({
        "type": "paragraph",
        "content": [
            {"type": "text", "text": "Bold", "marks": [{"type": "strong"}]},
            {"type": "text", "text": " and plain"},
        ],
    })

    assert adf_to_plain_text(document) == "Bold and plain"


def test_list_items_decode_one_per_line():
    document = markdown_to_adf("- first\n- second\n1. third")

    assert adf_to_plain_text(document) == "first\nsecond\nthird"


def test_whitespace_before_newline_is_collapsed():
    document = _doc(_paragraph("trailing   "), _paragraph("next"))

    assert adf_to_plain_text(document) == "trailing\nnext"


def test_document_model_is_accepted():
    document = Document(content=[Paragraph(content=[Text.strong("Heads up")]), Paragraph.of("Details")])

    assert adf_to_plain_text(document) == "Heads up\nDetails"


def test_unknown_tracker_nodes_contribute_their_text():
    document = _doc(
        {"type": "codeBlock", "attrs": {"language": "python"}, "content": [{"type": "text", "text": "x = 1"}]},
        {"type": "rule"},
        _paragraph("after"),
    )

    assert adf_to_plain_text(document) == "x = 1after"


@pytest.mark.parametrize("value", [
    [1, 2],
    42,
    {"type": "doc"},
    {"type": "doc", "content": "oops"},
    _doc({"type": "paragraph", "content": [{"type": "text", "text": 5}]}),
    _doc({"type": "paragraph", "content": [{"type": "text", "text": ["a", "b"]}]}),
])
def test_non_document_shapes_decode_to_empty_string(value):
    assert adf_to_plain_text(value) == ""


def test_non_string_text_runs_are_ignored():
    document = _doc(
        {"type": "paragraph", "content": [{"type": "text", "text": {"nested": True}}, {"type": "text", "text": "kept"}]},
    )

    assert adf_to_plain_text(document) == "kept"
