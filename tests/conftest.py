"""Shared pytest fixtures for the initforge test suite.

Provides reusable fixtures for:
- The bundled metadata catalog and a small hand-built catalog
- A real Jinja2 template renderer
- A ``ProjectDescription`` factory with sensible defaults
- Registries, generation contexts and a ready-to-use generator
- Recording contributors for ordering and failure tests
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from initforge.catalog import MetadataCatalog
from initforge.conditions import ALWAYS, Condition
from initforge.config import GeneratorConfig
from initforge.description.models import ProjectDescription
from initforge.project.context import GenerationContext
from initforge.project.generator import ProjectGenerator
from initforge.registry import Capability, ContributorRegistry, FunctionContributor
from initforge.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Catalog & rendering
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def catalog() -> MetadataCatalog:
    """The catalog bundled with the package."""
    return MetadataCatalog.default()


@pytest.fixture
def small_catalog() -> MetadataCatalog:
    """A minimal catalog with one facetted and one range-restricted entry."""
    return MetadataCatalog.from_dict(
        {
            "platform_versions": ["3.2.1"],
            "dependencies": [
                {
                    "id": "web",
                    "name": "Spring Web",
                    "group_id": "org.springframework.boot",
                    "artifact_id": "spring-boot-starter-web",
                    "facets": ["web", "json"],
                },
                {
                    "id": "legacy",
                    "group_id": "com.example",
                    "artifact_id": "legacy-support",
                    "compatibility_range": "[2.7.0,3.0.0)",
                },
            ],
        }
    )


@pytest.fixture(scope="session")
def renderer() -> TemplateRenderer:
    """A real renderer over the bundled templates."""
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------


@pytest.fixture
def make_description() -> Callable[..., ProjectDescription]:
    """Factory building a valid Java/Maven/jar description with overrides."""

    def _make(**overrides: Any) -> ProjectDescription:
        fields: dict[str, Any] = {
            "group_id": "com.example",
            "artifact_id": "demo",
            "name": "demo",
            "description": "Demo project",
            "package_name": "com.example.demo",
            "application_name": "DemoApplication",
            "platform_version": "3.2.1",
        }
        fields.update(overrides)
        return ProjectDescription(**fields)

    return _make


@pytest.fixture
def description(make_description) -> ProjectDescription:
    """Java / Maven / jar with the web starter."""
    return make_description(dependencies=("web",))


# ---------------------------------------------------------------------------
# Registry & context
# ---------------------------------------------------------------------------


@pytest.fixture
def make_registry(catalog) -> Callable[..., ContributorRegistry]:
    def _make(description: ProjectDescription, contributors=()) -> ContributorRegistry:
        registry = ContributorRegistry(description, catalog)
        registry.register_all(contributors)
        return registry

    return _make


@pytest.fixture
def context(description, catalog) -> GenerationContext:
    """A fresh generation context with an empty registry."""
    return GenerationContext(description, ContributorRegistry(description, catalog), catalog)


@pytest.fixture
def generator(catalog) -> ProjectGenerator:
    """A generator using the bundled catalog and templates."""
    return ProjectGenerator(GeneratorConfig(), catalog=catalog)


# ---------------------------------------------------------------------------
# Recording contributors
# ---------------------------------------------------------------------------


@pytest.fixture
def calls() -> list[str]:
    """Names of recording contributors in the order they ran."""
    return []


@pytest.fixture
def recording(calls) -> Callable[..., FunctionContributor]:
    """Factory for contributors that append their name to ``calls``."""

    def _make(
        name: str,
        capability: Capability = Capability.POST_PROCESS,
        *,
        condition: Condition = ALWAYS,
        priority: int = 0,
        runs_after: tuple[str, ...] = (),
        write: str | None = None,
    ) -> FunctionContributor:
        def _contribute(context: GenerationContext) -> None:
            calls.append(name)
            if write is not None:
                context.write_file(write, f"written by {name}\n")

        return FunctionContributor(
            name,
            capability,
            _contribute,
            condition=condition,
            priority=priority,
            runs_after=runs_after,
        )

    return _make


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    """Temporary directory for materialised projects (auto-cleanup)."""
    output = tmp_path / "output"
    output.mkdir()
    return output
