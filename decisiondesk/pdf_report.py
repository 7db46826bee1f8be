import os
from datetime import datetime, timezone
from typing import Iterable, List

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas

LINE_CHARS = 95


def safe_text(x) -> str:
    return str(x if x is not None else "").replace("\n", " ").strip()


def split_text(text: str, max_len: int = LINE_CHARS) -> List[str]:
    words = text.split()
    if not words:
        return []
    lines = []
    line = ""
    for w in words:
        if len(line) + len(w) + 1 <= max_len:
            line = (line + " " + w).strip()
        else:
            lines.append(line)
            line = w
    if line:
        lines.append(line)
    return lines


class _PageWriter:
    """Top-to-bottom text cursor that starts a new page near the bottom margin."""

    def __init__(self, c: canvas.Canvas):
        self.c = c
        self.width, self.height = A4
        self.y = self.height - 2 * cm

    def _ensure_room(self):
        if self.y < 3 * cm:
            self.c.showPage()
            self.y = self.height - 2 * cm

    def heading(self, text: str, size: int = 12):
        self.y -= 0.3 * cm
        self._ensure_room()
        self.c.setFont("Helvetica-Bold", size)
        self.c.drawString(2 * cm, self.y, text)
        self.y -= 0.8 * cm

    def line(self, text: str):
        for chunk in split_text(safe_text(text)) or [""]:
            self._ensure_room()
            self.c.setFont("Helvetica", 11)
            self.c.drawString(2 * cm, self.y, chunk)
            self.y -= 0.55 * cm

    def bullets(self, items: Iterable, empty: str = "None captured."):
        items = list(items)
        if not items:
            self.line(empty)
        for item in items:
            self.line(f"- {item}")


def _draw(c: canvas.Canvas, record: dict) -> None:
    w = _PageWriter(c)
    w.heading("DecisionDesk - Decision Report", size=18)
    w.line(f"Generated: {datetime.now(timezone.utc).isoformat(timespec='seconds')}")

    w.heading("Summary")
    w.line(f"Title: {safe_text(record.get('title'))}")
    w.line(f"Template: {safe_text(record.get('template_name'))}")
    w.line(f"Created (UTC): {safe_text(record.get('timestamp_utc'))}")
    w.line(f"Final score: {record.get('final_score')} / 10")
    w.line(f"Outcome: {safe_text(record.get('outcome'))}")
    w.line(f"Confidence: {safe_text(record.get('confidence'))}")

    w.heading("Context")
    w.line(record.get("context") or "N/A")

    w.heading("Assumptions")
    w.bullets(record.get("assumptions") or [])
    w.heading("Risks")
    w.bullets(record.get("risks") or [])

    w.heading("Scores")
    w.bullets(f"{k}: {v}" for k, v in (record.get("scores") or {}).items())

    exp = record.get("explanation") or {}
    w.heading("Why this outcome")
    w.bullets(f"strongest: {x.get('dimension')} ({x.get('weighted')})"
              for x in exp.get("top_positive_contributors", []))
    w.bullets(f"weakest: {x.get('dimension')} ({x.get('weighted')})"
              for x in exp.get("top_negative_contributors", []))

    sst = record.get("scenario_stress_test") or {}
    results = sst.get("results") or {}
    w.heading("Scenario stress test")
    if results:
        w.line(f"Spread (best - worst): {sst.get('spread')}")
        for label in ("best", "expected", "worst"):
            rr = results.get(label, {})
            w.line(f"{label.title()}: score={rr.get('score')} | outcome={rr.get('outcome')} | confidence={rr.get('confidence')}")
    else:
        w.line("No scenario data captured.")

    follow = record.get("follow_up")
    w.heading("Follow-up")
    if follow:
        w.line(f"Outcome: {safe_text(follow.get('outcome'))} ({safe_text(follow.get('updated_at_utc'))})")
        if follow.get("notes"):
            w.line(f"Notes: {follow.get('notes')}")
    else:
        w.line("Not recorded yet.")

    c.showPage()
    c.save()


def write_pdf_report(output_path: str, record: dict) -> str:
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    _draw(canvas.Canvas(output_path, pagesize=A4), record)
    return output_path
