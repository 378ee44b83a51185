"""Source file contributors for Java, Kotlin and Groovy projects."""

from __future__ import annotations

from abc import abstractmethod

from ..conditions import OnPackaging
from ..description.models import WAR
from ..project.context import GenerationContext
from ..registry import Capability
from .base import TemplateContributor


class _LanguageSourceContributor(TemplateContributor):
    """Renders ``source/<language>/<template>`` into a source set."""

    capability = Capability.SOURCE_FILE
    template_name = ""
    source_set = "main"

    @abstractmethod
    def file_name(self, context: GenerationContext) -> str:
        """Base name of the generated file, without extension."""

    def contribute(self, context: GenerationContext) -> None:
        language = context.description.language
        template = f"source/{language.value}/{self.template_name}.{language.source_extension}.j2"
        file_name = f"{self.file_name(context)}.{language.source_extension}"
        self.render(context, template, context.source_path(self.source_set, file_name))


class MainApplicationContributor(_LanguageSourceContributor):
    """The ``@SpringBootApplication`` entry point."""

    name = "main-application"
    template_name = "Application"

    def file_name(self, context: GenerationContext) -> str:
        return context.description.application_name


class ApplicationTestsContributor(_LanguageSourceContributor):
    """A context-loads smoke test next to the main class."""

    name = "application-tests"
    template_name = "ApplicationTests"
    source_set = "test"
    runs_after = ("main-application",)

    def file_name(self, context: GenerationContext) -> str:
        return f"{context.description.application_name}Tests"


class ServletInitializerContributor(_LanguageSourceContributor):
    """War deployments boot the application through a servlet initializer."""

    name = "servlet-initializer"
    template_name = "ServletInitializer"
    condition = OnPackaging(WAR)
    runs_after = ("main-application",)

    def file_name(self, context: GenerationContext) -> str:
        return "ServletInitializer"
