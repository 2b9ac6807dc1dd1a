from __future__ import annotations

from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer


def export_text(text: str, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text + "\n", encoding="utf-8")
    return output_path


def export_pdf(text: str, output_path: Path, title: str) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    styles = getSampleStyleSheet()
    line_style = ParagraphStyle(name="ReportLine", parent=styles["Normal"], fontName="Courier", fontSize=10, leading=13)

    story = [Paragraph(escape(title), styles["Title"]), Spacer(1, 0.2 * inch)]
    for line in text.splitlines():
        if line:
            story.append(Paragraph(escape(line), line_style))
        else:
            story.append(Spacer(1, 0.15 * inch))

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=letter,
        title=title,
        leftMargin=0.75 * inch,
        rightMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
    )
    doc.build(story)
    return output_path


def export_report(text: str, output_path: Path, title: str) -> Path:
    if output_path.suffix.lower() == ".txt":
        return export_text(text, output_path)
    if output_path.suffix.lower() == ".pdf":
        return export_pdf(text, output_path, title=title)
    raise ValueError("Unsupported export format. Use .txt or .pdf")
