"""In-process HTML-to-PDF conversion with WeasyPrint."""

from __future__ import annotations

import logging
from collections.abc import Callable

from src.rendering.base import ThreadedRenderStrategy
from src.rendering.markup import MarkupBuilder
from src.tailoring.models import ResumeDocument

logger = logging.getLogger(__name__)

HtmlConverter = Callable[[str, str], bytes]


def weasyprint_convert(html: str, base_url: str) -> bytes:
    """Convert HTML to PDF bytes with WeasyPrint."""
    # Imported here: WeasyPrint loads native libraries at import time
    from weasyprint import HTML

    return HTML(string=html, base_url=base_url).write_pdf()


class MarkupStrategy(ThreadedRenderStrategy):
    """Renders the Jinja2 markup and converts it in-process."""

    name = "markup"

    def __init__(
        self,
        markup: MarkupBuilder,
        timeout: float,
        converter: HtmlConverter | None = None,
    ):
        super().__init__(timeout)
        self.markup = markup
        self.converter = converter or weasyprint_convert

    def render_bytes(self, document: ResumeDocument) -> bytes:
        html = self.markup.render(document)
        data = self.converter(html, str(self.markup.template_dir))
        logger.debug(f"Converted markup to PDF ({len(data or b'')} bytes)")
        return data
