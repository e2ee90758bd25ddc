"""
src/tools/exports.py — export an orchestration result as JSON, CSV or PDF.

Provides:
- export_json(result, path): the full result, field for field
- export_actions_csv(result, path): one row per action record
- export_result_pdf(result, path): short report (ReportLab) with transcript, summary and action table

Notes:
- Raw results can be long JSON blobs; the PDF truncates them, JSON/CSV keep them whole.
"""


import csv
import json
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from orchestrator.models import OrchestrationResult


PDF_RESULT_CHARS = 160
CSV_HEADERS = ["index", "agent", "action", "raw_result"]


# --- JSON ----------------------------------------------------------------------
def export_json(result: OrchestrationResult, path: str) -> str:
    """
    Export the result as JSON.

    Returns: path
    """

    with open(path, "w", encoding="utf-8") as f:
        json.dump(result.model_dump(mode="json"), f, indent=2, ensure_ascii=False)

    return path


# --- CSV -----------------------------------------------------------------------
def export_actions_csv(result: OrchestrationResult, path: str) -> str:
    """
    Export the action log to CSV.

    Raises:
        ValueError if the result has no actions.
    """

    if not result.actions:
        raise ValueError("No actions to export.")

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_HEADERS)
        writer.writeheader()
        for i, a in enumerate(result.actions, start=1):
            writer.writerow({"index": i, "agent": a.agent, "action": a.action, "raw_result": a.raw_result})

    return path


# --- PDF -----------------------------------------------------------------------
def _clip(text: str, limit: int = PDF_RESULT_CHARS) -> str:

    text = text or ""

    return text if len(text) <= limit else text[: limit - 1] + "…"

def export_result_pdf(result: OrchestrationResult, path: str) -> str:
    """
    Export a one-page style report of the run.

    Returns: path
    """

    doc = SimpleDocTemplate(path, pagesize=A4)
    styles = getSampleStyleSheet()
    cell = styles["BodyText"]
    elements = []

    status = "Completed" if result.completed else "Not completed"

    elements.append(Paragraph("<b>Voice command report</b>", styles["Title"]))
    elements.append(Paragraph(f"Recording: {escape(result.audio_path)}", styles["Normal"]))
    elements.append(Paragraph(f"Status: {status}", styles["Normal"]))
    elements.append(Paragraph(f"Transcript: {escape(result.transcription or '(none)')}", styles["Normal"]))
    elements.append(Paragraph(f"Summary: {escape(result.summary or '(none)')}", styles["Normal"]))
    elements.append(Spacer(1, 12))

    # Action table
    data = [["#", "Agent", "Action", "Result"]]
    for i, a in enumerate(result.actions, start=1):
        data.append([
            str(i),
            Paragraph(escape(a.agent), cell),
            Paragraph(escape(a.action), cell),
            Paragraph(escape(_clip(a.raw_result)), cell),
        ])

    table = Table(data, colWidths=[25, 95, 95, 300], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))
    elements.append(table)

    doc.build(elements)

    return path
