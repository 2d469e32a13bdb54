"""HTML rendering of resume documents.

Produces the markup consumed by the remote rendering service and the
in-process HTML-to-PDF converter.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from src.rendering.config import RenderingConfig, get_rendering_config
from src.rendering.models import SKILL_GROUP_LABELS
from src.tailoring.models import ResumeDocument

logger = logging.getLogger(__name__)

PACKAGE_TEMPLATE_DIR = Path(__file__).parent / "templates"


class MarkupBuilder:
    """Renders a ResumeDocument to a standalone HTML page with Jinja2."""

    def __init__(self, config: RenderingConfig | None = None):
        self.config = config or get_rendering_config()
        self._setup_jinja()

    def _setup_jinja(self) -> None:
        """Set up Jinja2 template environment."""
        template_dir = self.config.template_dir
        if not self.config.get_resume_template_path().exists():
            # Use default templates from package
            template_dir = PACKAGE_TEMPLATE_DIR

        self.template_dir = template_dir
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=True,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def _load_styles(self) -> str:
        """Load CSS styles from template directory."""
        styles_path = self.template_dir / "styles.css"
        if styles_path.exists():
            return styles_path.read_text(encoding="utf-8")
        return ""

    def context(self, document: ResumeDocument) -> dict[str, Any]:
        """Build the template context for a document."""
        groups = document.skills_by_priority()
        skill_groups = [
            {"label": SKILL_GROUP_LABELS[priority], "skills": names}
            for priority, names in groups.items()
            if names
        ]
        return {
            "doc": document,
            "person": document.personal_info,
            "contact_items": document.personal_info.contact_items(),
            "skill_groups": skill_groups,
            "page_size": "A4" if self.config.page_size == "A4" else "Letter",
            "styles": self._load_styles(),
        }

    def render(self, document: ResumeDocument) -> str:
        """Render the document to HTML."""
        template = self.jinja_env.get_template(self.config.resume_template)
        html = template.render(**self.context(document))
        logger.debug(f"Rendered resume markup ({len(html)} chars)")
        return html
