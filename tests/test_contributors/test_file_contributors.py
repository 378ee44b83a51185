"""Unit tests for source, resource and project-file contributors.

Covers:
- Main application class, test class and servlet initializer per language
- application.properties
- .gitignore per build system
- HELP.md links from the catalog
- default_contributors registration list
"""

from __future__ import annotations

import pytest

from initforge.contributors import default_contributors
from initforge.contributors.project_files import GitIgnoreContributor, HelpDocumentContributor
from initforge.contributors.resources import ApplicationPropertiesContributor
from initforge.contributors.source import (
    ApplicationTestsContributor,
    MainApplicationContributor,
    ServletInitializerContributor,
    _LanguageSourceContributor,
)
from initforge.conditions import evaluate
from initforge.project.context import GenerationContext
from initforge.registry import Capability, ContributorRegistry

pytestmark = pytest.mark.unit


@pytest.fixture
def make_context(catalog):
    def _make(description) -> GenerationContext:
        return GenerationContext(description, ContributorRegistry(description, catalog), catalog)

    return _make


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


class TestSourceContributors:
    @pytest.mark.parametrize(
        "language, main_path, marker",
        [
            ("java", "src/main/java/com/example/demo/DemoApplication.java", "public class DemoApplication"),
            ("kotlin", "src/main/kotlin/com/example/demo/DemoApplication.kt", "runApplication<DemoApplication>"),
            ("groovy", "src/main/groovy/com/example/demo/DemoApplication.groovy", "class DemoApplication"),
        ],
    )
    def test_main_application(self, renderer, make_context, make_description, language, main_path, marker):
        context = make_context(make_description(language=language))
        MainApplicationContributor(renderer).contribute(context)
        assert context.tree.paths() == [main_path]
        text = context.tree.get(main_path).text
        assert text.startswith("package com.example.demo")
        assert marker in text

    def test_application_tests(self, renderer, make_context, description):
        context = make_context(description)
        ApplicationTestsContributor(renderer).contribute(context)
        path = "src/test/java/com/example/demo/DemoApplicationTests.java"
        assert "class DemoApplicationTests" in context.tree.get(path).text

    def test_servlet_initializer(self, renderer, make_context, make_description):
        description = make_description(packaging="war")
        assert evaluate(ServletInitializerContributor.condition, description)
        assert not evaluate(ServletInitializerContributor.condition, make_description())
        context = make_context(description)
        ServletInitializerContributor(renderer).contribute(context)
        text = context.tree.get("src/main/java/com/example/demo/ServletInitializer.java").text
        assert "application.sources(DemoApplication.class)" in text

    def test_file_name_is_required(self, renderer):
        class UnnamedSource(_LanguageSourceContributor):
            name = "unnamed-source"
            template_name = "Application"

        with pytest.raises(TypeError):
            UnnamedSource(renderer)


# ---------------------------------------------------------------------------
# Resources & project files
# ---------------------------------------------------------------------------


class TestResourceContributors:
    def test_application_properties(self, renderer, make_context, make_description):
        context = make_context(make_description(name="shop"))
        ApplicationPropertiesContributor(renderer).contribute(context)
        entry = context.tree.get("src/main/resources/application.properties")
        assert entry.text == "spring.application.name=shop\n"


class TestProjectFiles:
    def test_gitignore_maven(self, renderer, make_context, description):
        context = make_context(description)
        GitIgnoreContributor(renderer).contribute(context)
        text = context.tree.get(".gitignore").text
        assert "target/" in text
        assert ".gradle" not in text

    def test_gitignore_gradle(self, renderer, make_context, make_description):
        context = make_context(make_description(build_system="gradle"))
        GitIgnoreContributor(renderer).contribute(context)
        assert ".gradle" in context.tree.get(".gitignore").text

    def test_help_gradle_without_guides(self, renderer, make_context, make_description):
        context = make_context(make_description(build_system="gradle", dependencies=("actuator",)))
        HelpDocumentContributor(renderer).contribute(context)
        text = context.tree.get("HELP.md").text
        assert "https://docs.gradle.org" in text
        assert "docs/3.2.1/gradle-plugin/reference/html/" in text
        assert "#actuator" in text
        assert "### Guides" not in text


# ---------------------------------------------------------------------------
# Registration list
# ---------------------------------------------------------------------------


class TestDefaultContributors:
    def test_unique_names(self, renderer):
        names = [c.name for c in default_contributors(renderer)]
        assert len(names) == len(set(names))

    def test_fresh_instances(self, renderer):
        first = default_contributors(renderer)
        second = default_contributors(renderer)
        assert all(a is not b for a, b in zip(first, second))

    def test_every_capability_covered(self, renderer):
        capabilities = {c.capability for c in default_contributors(renderer)}
        assert capabilities == set(Capability)
