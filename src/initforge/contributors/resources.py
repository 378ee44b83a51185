"""Resource file contributors."""

from __future__ import annotations

from ..project.context import GenerationContext
from ..registry import Capability
from .base import TemplateContributor


class ApplicationPropertiesContributor(TemplateContributor):
    name = "application-properties"
    capability = Capability.RESOURCE_FILE

    def contribute(self, context: GenerationContext) -> None:
        self.render(
            context,
            "resources/application.properties.j2",
            "src/main/resources/application.properties",
        )
