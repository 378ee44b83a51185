"""Project-level files written once everything else is in place."""

from __future__ import annotations

from typing import Any

from ..description.models import BuildSystem
from ..project.context import GenerationContext
from ..registry import Capability
from .base import TemplateContributor

_BUILD_LINKS: dict[BuildSystem, list[dict[str, str]]] = {
    BuildSystem.MAVEN: [
        {
            "title": "Official Apache Maven documentation",
            "href": "https://maven.apache.org/guides/index.html",
        },
        {
            "title": "Spring Boot Maven Plugin Reference Guide",
            "href": "https://docs.spring.io/spring-boot/docs/{bootVersion}/maven-plugin/reference/html/",
        },
    ],
    BuildSystem.GRADLE: [
        {
            "title": "Official Gradle documentation",
            "href": "https://docs.gradle.org",
        },
        {
            "title": "Spring Boot Gradle Plugin Reference Guide",
            "href": "https://docs.spring.io/spring-boot/docs/{bootVersion}/gradle-plugin/reference/html/",
        },
    ],
}


class GitIgnoreContributor(TemplateContributor):
    name = "gitignore"
    capability = Capability.POST_PROCESS

    def contribute(self, context: GenerationContext) -> None:
        self.render(context, "project/gitignore.j2", ".gitignore")


class HelpDocumentContributor(TemplateContributor):
    """Writes ``HELP.md`` with build tool and dependency documentation links."""

    name = "help-document"
    capability = Capability.POST_PROCESS
    runs_after = ("gitignore",)

    def contribute(self, context: GenerationContext) -> None:
        version = context.description.platform_version
        build_links = [
            _expand(link, version) for link in _BUILD_LINKS[context.description.build_system]
        ]
        reference_links: list[dict[str, Any]] = []
        guide_links: list[dict[str, Any]] = []
        for dependency_id in context.description.dependencies:
            metadata = context.catalog.resolve_dependency(dependency_id) if context.catalog else None
            if metadata is None:
                continue
            for link in metadata.links:
                entry = _expand(
                    {"title": link.description or metadata.name or metadata.id, "href": link.href},
                    version,
                )
                if link.rel == "guide":
                    guide_links.append(entry)
                else:
                    reference_links.append(entry)

        self.render(
            context,
            "project/HELP.md.j2",
            "HELP.md",
            build_links=build_links,
            reference_links=reference_links,
            guide_links=guide_links,
        )


def _expand(link: dict[str, str], platform_version: str) -> dict[str, str]:
    return {**link, "href": link["href"].replace("{bootVersion}", platform_version)}
