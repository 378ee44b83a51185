"""Built-in contributors.

Contributors are registered explicitly: ``default_contributors`` returns the
built-in set in registration order, and hosting applications append their own
extension contributors after it.

Quick usage::

    from initforge.contributors import default_contributors
    from initforge.templates import TemplateRenderer

    contributors = default_contributors(TemplateRenderer())
"""

from __future__ import annotations

from ..registry import Contributor
from ..templates import TemplateRenderer
from .build import (
    DependenciesCustomizer,
    GradleBuildContributor,
    GradleKotlinDslBuildContributor,
    GroovyBuildCustomizer,
    JacksonKotlinCustomizer,
    JarPackagingContributor,
    JavaVersionCustomizer,
    KotlinBuildCustomizer,
    MavenBuildContributor,
    WarPackagingContributor,
)
from .project_files import GitIgnoreContributor, HelpDocumentContributor
from .resources import ApplicationPropertiesContributor
from .source import (
    ApplicationTestsContributor,
    MainApplicationContributor,
    ServletInitializerContributor,
)


def default_contributors(renderer: TemplateRenderer) -> list[Contributor]:
    """Return fresh instances of every built-in contributor."""
    return [
        JavaVersionCustomizer(),
        DependenciesCustomizer(),
        KotlinBuildCustomizer(),
        JacksonKotlinCustomizer(),
        GroovyBuildCustomizer(),
        JarPackagingContributor(),
        WarPackagingContributor(),
        MainApplicationContributor(renderer),
        ApplicationTestsContributor(renderer),
        ServletInitializerContributor(renderer),
        ApplicationPropertiesContributor(renderer),
        MavenBuildContributor(renderer),
        GradleBuildContributor(renderer),
        GradleKotlinDslBuildContributor(renderer),
        GitIgnoreContributor(renderer),
        HelpDocumentContributor(renderer),
    ]


__all__ = [
    "ApplicationPropertiesContributor",
    "ApplicationTestsContributor",
    "DependenciesCustomizer",
    "GitIgnoreContributor",
    "GradleBuildContributor",
    "GradleKotlinDslBuildContributor",
    "GroovyBuildCustomizer",
    "HelpDocumentContributor",
    "JacksonKotlinCustomizer",
    "JarPackagingContributor",
    "JavaVersionCustomizer",
    "KotlinBuildCustomizer",
    "MainApplicationContributor",
    "MavenBuildContributor",
    "ServletInitializerContributor",
    "WarPackagingContributor",
    "default_contributors",
]
