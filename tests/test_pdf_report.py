"""
Tests for the PDF decision report.
"""

from decisiondesk.decisions import build_decision
from decisiondesk.pdf_report import safe_text, split_text, write_pdf_report


def test_split_text_wraps_on_words():
    lines = split_text("alpha beta gamma delta", max_len=11)
    assert lines == ["alpha beta", "gamma delta"]
    assert split_text("   ") == []


def test_safe_text():
    assert safe_text(None) == ""
    assert safe_text(" a\nb ") == "a b"


def test_write_pdf_report(tmp_path):
    record = build_decision(
        "purchase",
        "Buy a new laptop",
        context="The old one is five years old. " * 20,
        assumptions_text="\n".join(f"assumption {i}" for i in range(60)),
    )
    record["follow_up"] = {"outcome": "Success", "notes": "worth it", "updated_at_utc": "2026-01-01T00:00:00Z"}

    path = write_pdf_report(str(tmp_path / "reports" / "r.pdf"), record)

    data = (tmp_path / "reports" / "r.pdf").read_bytes()
    assert path.endswith("r.pdf")
    assert data.startswith(b"%PDF")
