"""Primary rendering strategy: direct vector drawing with ReportLab.

Lays the document out line by line on a canvas, tracking the vertical
cursor and starting a new page when the next block would cross the
bottom margin. No external process is involved.
"""

from __future__ import annotations

from io import BytesIO

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from src.rendering.base import ThreadedRenderStrategy
from src.rendering.models import SKILL_GROUP_LABELS
from src.tailoring.models import ResumeDocument

PAGE_SIZES = {"A4": A4, "LETTER": LETTER}

MARGIN = 50
ACCENT = HexColor("#2c3e50")
MUTED = HexColor("#555555")
TEXT = HexColor("#222222")
RULE = HexColor("#cccccc")


def pdf_safe(text: str) -> str:
    """Reduce text to characters the standard PDF fonts can encode."""
    return text.encode("cp1252", errors="replace").decode("cp1252")


class CanvasLayout:
    """Cursor-based layout helper on top of a ReportLab canvas."""

    def __init__(self, pdf: canvas.Canvas, page_size: tuple[float, float]):
        self.pdf = pdf
        self.width, self.height = page_size
        self.left = MARGIN
        self.right = self.width - MARGIN
        self.y = self.height - MARGIN
        self.pages = 1

    @property
    def text_width(self) -> float:
        return self.right - self.left

    def ensure_space(self, needed: float) -> None:
        """Start a new page if ``needed`` points do not fit above the margin."""
        if self.y - needed < MARGIN:
            self.pdf.showPage()
            self.pages += 1
            self.y = self.height - MARGIN

    def space(self, amount: float) -> None:
        self.y -= amount

    def centered(self, text: str, font: str, size: float, color=TEXT) -> None:
        for line in simpleSplit(pdf_safe(text), font, size, self.text_width):
            self.ensure_space(size + 4)
            self.pdf.setFont(font, size)
            self.pdf.setFillColor(color)
            self.pdf.drawCentredString(self.width / 2, self.y - size, line)
            self.y -= size + 4

    def paragraph(
        self,
        text: str,
        font: str = "Helvetica",
        size: float = 10,
        color=TEXT,
        indent: float = 0,
    ) -> None:
        leading = size * 1.35
        width = self.text_width - indent
        for line in simpleSplit(pdf_safe(text), font, size, width):
            self.ensure_space(leading)
            self.pdf.setFont(font, size)
            self.pdf.setFillColor(color)
            self.pdf.drawString(self.left + indent, self.y - size, line)
            self.y -= leading

    def row(self, left: str, right: str, font: str = "Helvetica-Bold", size: float = 10.5) -> None:
        """Left text with right-aligned secondary text on the same baseline."""
        self.ensure_space(size * 1.4)
        self.pdf.setFillColor(TEXT)
        self.pdf.setFont(font, size)
        right = pdf_safe(right)
        right_width = self.pdf.stringWidth(right, "Helvetica", size - 1) if right else 0
        lines = simpleSplit(pdf_safe(left), font, size, self.text_width - right_width - 12)
        baseline = self.y - size
        for index, line in enumerate(lines or [""]):
            if index:
                self.ensure_space(size * 1.4)
                baseline = self.y - size
            self.pdf.setFont(font, size)
            self.pdf.drawString(self.left, baseline, line)
            if index == 0 and right:
                self.pdf.setFont("Helvetica", size - 1)
                self.pdf.setFillColor(MUTED)
                self.pdf.drawRightString(self.right, baseline, right)
                self.pdf.setFillColor(TEXT)
            self.y -= size * 1.4

    def rule(self, color=RULE, weight: float = 0.75) -> None:
        self.ensure_space(6)
        self.pdf.setStrokeColor(color)
        self.pdf.setLineWidth(weight)
        self.pdf.line(self.left, self.y - 2, self.right, self.y - 2)
        self.y -= 6

    def section_heading(self, title: str) -> None:
        # Keep a heading together with at least two lines of content
        self.ensure_space(14 + 30)
        self.space(6)
        self.pdf.setFont("Helvetica-Bold", 12)
        self.pdf.setFillColor(ACCENT)
        self.pdf.drawString(self.left, self.y - 12, pdf_safe(title.upper()))
        self.y -= 15
        self.rule()


class VectorStrategy(ThreadedRenderStrategy):
    """Draws the resume with ReportLab canvas primitives."""

    name = "vector"

    def __init__(self, timeout: float, page_size: str = "A4"):
        super().__init__(timeout)
        self.page_size = PAGE_SIZES.get(page_size.upper(), A4)

    def render_bytes(self, document: ResumeDocument) -> bytes:
        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=self.page_size)
        person = document.personal_info
        pdf.setTitle(f"{person.full_name} - Resume")
        pdf.setAuthor(person.full_name)

        layout = CanvasLayout(pdf, self.page_size)
        self._draw_header(layout, document)

        if document.summary:
            layout.section_heading("Professional Summary")
            layout.paragraph(document.summary)

        groups = document.skills_by_priority()
        if any(groups.values()):
            layout.section_heading("Skills")
            for priority, names in groups.items():
                if names:
                    label = SKILL_GROUP_LABELS[priority]
                    layout.paragraph(f"{label}: {', '.join(names)}")

        layout.section_heading("Experience")
        for job in document.experience:
            layout.row(job.title, job.date_range())
            subtitle = job.company + (f", {job.location}" if job.location else "")
            layout.paragraph(subtitle, font="Helvetica-Oblique", size=9.5, color=MUTED)
            if job.description:
                layout.paragraph(job.description, size=9.5)
            layout.space(4)

        layout.section_heading("Education")
        for edu in document.education:
            layout.row(edu.heading, edu.date_range())
            subtitle = edu.institution + (f" (GPA: {edu.gpa})" if edu.gpa else "")
            layout.paragraph(subtitle, font="Helvetica-Oblique", size=9.5, color=MUTED)
            layout.space(4)

        layout.section_heading("Projects")
        for project in document.projects:
            layout.row(project.name, "")
            if project.description:
                layout.paragraph(project.description, size=9.5)
            if project.technologies:
                layout.paragraph(
                    f"Technologies: {', '.join(project.technologies)}",
                    font="Helvetica-Oblique",
                    size=9,
                    color=MUTED,
                )
            layout.space(4)

        pdf.save()
        return buffer.getvalue()

    def _draw_header(self, layout: CanvasLayout, document: ResumeDocument) -> None:
        person = document.personal_info
        layout.centered(person.full_name, "Helvetica-Bold", 20, ACCENT)
        contact = "  |  ".join(person.contact_items())
        if contact:
            layout.centered(contact, "Helvetica", 9.5, MUTED)
        layout.space(2)
        layout.rule(ACCENT, 1.5)
