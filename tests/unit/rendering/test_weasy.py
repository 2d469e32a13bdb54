"""Tests for the in-process markup conversion strategy."""

import pytest

from src.rendering.config import RenderingConfig
from src.rendering.markup import PACKAGE_TEMPLATE_DIR, MarkupBuilder
from src.rendering.weasy import MarkupStrategy, weasyprint_convert


@pytest.fixture
def markup():
    return MarkupBuilder(RenderingConfig(_env_file=None, template_dir=PACKAGE_TEMPLATE_DIR))


class TestMarkupStrategy:
    """Tests for MarkupStrategy with an injected converter."""

    def test_default_converter_is_weasyprint(self, markup):
        assert MarkupStrategy(markup, timeout=5).converter is weasyprint_convert

    @pytest.mark.asyncio
    async def test_converter_receives_rendered_html(self, markup, resume_document):
        calls = []

        def convert(html: str, base_url: str) -> bytes:
            calls.append((html, base_url))
            return b"%PDF-1.7 converted"

        artifact = await MarkupStrategy(markup, timeout=5, converter=convert).render(
            resume_document
        )

        assert artifact.strategy == "markup"
        assert artifact.data == b"%PDF-1.7 converted"
        html, base_url = calls[0]
        assert "Ada Lovelace" in html
        assert base_url == str(PACKAGE_TEMPLATE_DIR)

    @pytest.mark.asyncio
    async def test_converter_errors_propagate(self, markup, resume_document):
        def convert(html: str, base_url: str) -> bytes:
            raise OSError("cannot load library 'pango'")

        with pytest.raises(OSError, match="pango"):
            await MarkupStrategy(markup, timeout=5, converter=convert).render(resume_document)

    @pytest.mark.asyncio
    async def test_empty_output_rejected(self, markup, resume_document):
        strategy = MarkupStrategy(markup, timeout=5, converter=lambda html, base: b"")

        with pytest.raises(ValueError):
            await strategy.render(resume_document)
