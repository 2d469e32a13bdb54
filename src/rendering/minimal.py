"""Last-resort renderer that writes a plain-text PDF by hand.

Needs nothing beyond the standard library, so it works when every
other renderer is unavailable. Output uses the built-in Helvetica fonts
with WinAnsi encoding and simple greedy word wrapping.
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass

from src.rendering.base import ThreadedRenderStrategy
from src.rendering.models import SKILL_GROUP_LABELS
from src.tailoring.models import ResumeDocument

PAGE_SIZES = {"A4": (595, 842), "LETTER": (612, 792)}
MARGIN = 50
# Average Helvetica glyph width as a fraction of the font size
AVERAGE_CHAR_WIDTH = 0.5

REGULAR = "F1"
BOLD = "F2"


@dataclass(frozen=True)
class TextLine:
    text: str
    font: str = REGULAR
    size: float = 10.0
    gap_before: float = 0.0


def escape_pdf_text(text: str) -> str:
    """Escape a string for use inside a PDF literal string."""
    text = text.encode("cp1252", errors="replace").decode("latin-1")
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def wrap(text: str, size: float, width: float) -> list[str]:
    max_chars = max(int(width / (size * AVERAGE_CHAR_WIDTH)), 10)
    return textwrap.wrap(text, max_chars) or [""]


class MinimalPdfWriter:
    """Builds a multi-page PDF 1.4 file from a list of text lines."""

    def __init__(self, page_size: tuple[int, int] = PAGE_SIZES["A4"]):
        self.width, self.height = page_size

    def paginate(self, lines: list[TextLine]) -> list[list[tuple[TextLine, float]]]:
        """Assign each wrapped line a baseline, splitting into pages."""
        text_width = self.width - 2 * MARGIN
        pages: list[list[tuple[TextLine, float]]] = [[]]
        y = self.height - MARGIN

        for line in lines:
            leading = line.size * 1.4
            y -= line.gap_before
            for chunk in wrap(line.text, line.size, text_width):
                if y - leading < MARGIN:
                    pages.append([])
                    y = self.height - MARGIN
                y -= leading
                pages[-1].append((TextLine(chunk, line.font, line.size), y))

        return pages

    def content_stream(self, placed: list[tuple[TextLine, float]]) -> bytes:
        ops = []
        for line, y in placed:
            if not line.text:
                continue
            ops.append(
                f"BT /{line.font} {line.size:g} Tf {MARGIN} {y:.2f} Td "
                f"({escape_pdf_text(line.text)}) Tj ET"
            )
        return "\n".join(ops).encode("latin-1")

    def write(self, lines: list[TextLine]) -> bytes:
        pages = self.paginate(lines)
        page_count = len(pages)
        # Objects 1-4 are fixed; each page adds a page object and its content
        page_ids = [5 + 2 * i for i in range(page_count)]

        objects: list[bytes] = [
            b"<< /Type /Catalog /Pages 2 0 R >>",
            (
                f"<< /Type /Pages /Kids [{' '.join(f'{pid} 0 R' for pid in page_ids)}] "
                f"/Count {page_count} >>"
            ).encode("latin-1"),
            b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
            b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica-Bold /Encoding /WinAnsiEncoding >>",
        ]
        for pid, placed in zip(page_ids, pages, strict=True):
            objects.append(
                (
                    f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 {self.width} {self.height}] "
                    f"/Resources << /Font << /{REGULAR} 3 0 R /{BOLD} 4 0 R >> >> "
                    f"/Contents {pid + 1} 0 R >>"
                ).encode("latin-1")
            )
            stream = self.content_stream(placed)
            objects.append(
                f"<< /Length {len(stream)} >>\nstream\n".encode("latin-1")
                + stream
                + b"\nendstream"
            )

        out = bytearray(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n")
        offsets = []
        for number, body in enumerate(objects, start=1):
            offsets.append(len(out))
            out += f"{number} 0 obj\n".encode("latin-1") + body + b"\nendobj\n"

        xref_offset = len(out)
        out += f"xref\n0 {len(objects) + 1}\n".encode("latin-1")
        out += b"0000000000 65535 f \n"
        for offset in offsets:
            out += f"{offset:010d} 00000 n \n".encode("latin-1")
        out += (
            f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
            f"startxref\n{xref_offset}\n%%EOF\n"
        ).encode("latin-1")
        return bytes(out)


def document_lines(document: ResumeDocument) -> list[TextLine]:
    """Flatten a resume into styled text lines."""
    person = document.personal_info
    lines = [TextLine(person.full_name, BOLD, 18)]
    contact = " | ".join(person.contact_items())
    if contact:
        lines.append(TextLine(contact, REGULAR, 9))

    def heading(title: str) -> None:
        lines.append(TextLine(title.upper(), BOLD, 12, gap_before=10))

    if document.summary:
        heading("Professional Summary")
        lines.append(TextLine(document.summary))

    groups = document.skills_by_priority()
    if any(groups.values()):
        heading("Skills")
        for priority, names in groups.items():
            if names:
                lines.append(TextLine(f"{SKILL_GROUP_LABELS[priority]}: {', '.join(names)}"))

    heading("Experience")
    for job in document.experience:
        lines.append(TextLine(f"{job.title} - {job.company}", BOLD, 10.5, gap_before=4))
        lines.append(TextLine(job.date_range(), REGULAR, 9))
        if job.description:
            lines.append(TextLine(job.description))

    heading("Education")
    for edu in document.education:
        lines.append(TextLine(edu.heading, BOLD, 10.5, gap_before=4))
        lines.append(TextLine(f"{edu.institution}, {edu.date_range()}", REGULAR, 9))

    heading("Projects")
    for project in document.projects:
        lines.append(TextLine(project.name, BOLD, 10.5, gap_before=4))
        if project.description:
            lines.append(TextLine(project.description))
        if project.technologies:
            lines.append(TextLine(f"Technologies: {', '.join(project.technologies)}", REGULAR, 9))

    return lines


class MinimalStrategy(ThreadedRenderStrategy):
    """Plain-text PDF with no third-party dependencies."""

    name = "minimal"

    def __init__(self, timeout: float, page_size: str = "A4"):
        super().__init__(timeout)
        self.writer = MinimalPdfWriter(PAGE_SIZES.get(page_size.upper(), PAGE_SIZES["A4"]))

    def render_bytes(self, document: ResumeDocument) -> bytes:
        return self.writer.write(document_lines(document))
