"""Shared base class for template-backed contributors."""

from __future__ import annotations

from typing import Any

from ..project.context import ArchiveEntry, GenerationContext
from ..registry import Contributor
from ..templates import TemplateRenderer


class TemplateContributor(Contributor):
    """A contributor that renders Jinja2 templates into the project tree."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def render(
        self,
        context: GenerationContext,
        template_path: str,
        output_path: str,
        *,
        executable: bool = False,
        **extra: Any,
    ) -> ArchiveEntry:
        """Render *template_path* and add it to the tree at *output_path*."""
        content = self.renderer.render(template_path, context.template_context(**extra))
        return context.write_file(output_path, content, executable=executable)
