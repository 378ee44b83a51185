"""Build model customizers, packaging contributors and build-file writers.

Customizers run first and shape the in-memory ``Build``; the packaging
contributor records the artifact shape; finally exactly one build-file writer
(Maven, Gradle Groovy DSL or Gradle Kotlin DSL) renders the model together
with its wrapper scripts.
"""

from __future__ import annotations

import logging

from ..catalog import DependencyScope
from ..conditions import OnBuildSystem, OnFacet, OnLanguage, OnPackaging
from ..description.models import JAR, WAR, BuildSystem
from ..project.context import BuildDependency, GenerationContext
from ..registry import Capability, Contributor
from .base import TemplateContributor

logger = logging.getLogger(__name__)

BOOT_GROUP = "org.springframework.boot"
KOTLIN_GROUP = "org.jetbrains.kotlin"


# ---------------------------------------------------------------------------
# Build customizers
# ---------------------------------------------------------------------------


class JavaVersionCustomizer(Contributor):
    """Records the requested Java version as a build property."""

    name = "java-version"
    capability = Capability.BUILD_CUSTOMIZER
    priority = 100

    def contribute(self, context: GenerationContext) -> None:
        context.build.properties["java.version"] = context.description.java_version


class DependenciesCustomizer(Contributor):
    """Resolves requested dependency ids into build coordinates.

    Adds the root starter when no requested dependency is itself a starter,
    and always adds the test starter.
    """

    name = "dependencies"
    capability = Capability.BUILD_CUSTOMIZER
    priority = 50
    runs_after = ("java-version",)

    def contribute(self, context: GenerationContext) -> None:
        resolved = []
        for dependency_id in context.description.dependencies:
            metadata = context.catalog.resolve_dependency(dependency_id) if context.catalog else None
            if metadata is None:
                raise LookupError(f"Dependency '{dependency_id}' is not in the catalog")
            resolved.append((dependency_id, metadata))

        if not any(meta.artifact_id.startswith("spring-boot-starter") for _, meta in resolved):
            context.build.add_dependency("root_starter", BuildDependency(BOOT_GROUP, "spring-boot-starter"))

        for dependency_id, metadata in resolved:
            context.build.add_dependency(
                dependency_id,
                BuildDependency(
                    group_id=metadata.group_id,
                    artifact_id=metadata.artifact_id,
                    version=metadata.version,
                    scope=metadata.scope,
                ),
            )

        context.build.add_dependency(
            "test",
            BuildDependency(BOOT_GROUP, "spring-boot-starter-test", scope=DependencyScope.TEST),
        )
        logger.debug("Resolved %d build dependencies", len(context.build.dependencies))


class KotlinBuildCustomizer(Contributor):
    """Adds the Kotlin runtime libraries and version property."""

    name = "kotlin-build"
    capability = Capability.BUILD_CUSTOMIZER
    condition = OnLanguage("kotlin")
    runs_after = ("dependencies",)

    def contribute(self, context: GenerationContext) -> None:
        build = context.build
        build.add_dependency("kotlin-reflect", BuildDependency(KOTLIN_GROUP, "kotlin-reflect"))
        # The Gradle Kotlin plugin adds the standard library on its own.
        if context.description.build_system is BuildSystem.MAVEN:
            build.properties["kotlin.version"] = context.settings.kotlin_version
            build.add_dependency("kotlin-stdlib", BuildDependency(KOTLIN_GROUP, "kotlin-stdlib"))
        build.add_dependency(
            "kotlin-test",
            BuildDependency(KOTLIN_GROUP, "kotlin-test-junit5", scope=DependencyScope.TEST),
        )


class JacksonKotlinCustomizer(Contributor):
    """Kotlin projects with JSON support need the Kotlin Jackson module."""

    name = "jackson-kotlin"
    capability = Capability.BUILD_CUSTOMIZER
    condition = OnLanguage("kotlin") & OnFacet("json")
    runs_after = ("kotlin-build",)

    def contribute(self, context: GenerationContext) -> None:
        context.build.add_dependency(
            "jackson-module-kotlin",
            BuildDependency("com.fasterxml.jackson.module", "jackson-module-kotlin"),
        )


class GroovyBuildCustomizer(Contributor):
    name = "groovy-build"
    capability = Capability.BUILD_CUSTOMIZER
    condition = OnLanguage("groovy")
    runs_after = ("dependencies",)

    def contribute(self, context: GenerationContext) -> None:
        context.build.add_dependency("groovy", BuildDependency("org.apache.groovy", "groovy"))


# ---------------------------------------------------------------------------
# Packaging
# ---------------------------------------------------------------------------


class JarPackagingContributor(Contributor):
    name = "jar-packaging"
    capability = Capability.PACKAGING
    condition = OnPackaging(JAR)

    def contribute(self, context: GenerationContext) -> None:
        context.build.packaging = JAR


class WarPackagingContributor(Contributor):
    """Deployable war: the embedded container becomes a provided dependency."""

    name = "war-packaging"
    capability = Capability.PACKAGING
    condition = OnPackaging(WAR)

    def contribute(self, context: GenerationContext) -> None:
        context.build.packaging = WAR
        context.build.add_dependency(
            "tomcat",
            BuildDependency(BOOT_GROUP, "spring-boot-starter-tomcat", scope=DependencyScope.PROVIDED),
        )


# ---------------------------------------------------------------------------
# Build-file writers
# ---------------------------------------------------------------------------


class MavenBuildContributor(TemplateContributor):
    """Writes ``pom.xml`` and the Maven wrapper."""

    name = "maven-build"
    capability = Capability.BUILD_FILE
    condition = OnBuildSystem("maven")

    def contribute(self, context: GenerationContext) -> None:
        self.render(context, "maven/pom.xml.j2", "pom.xml")
        self.render(context, "maven/mvnw.j2", "mvnw", executable=True)
        self.render(
            context,
            "maven/maven-wrapper.properties.j2",
            ".mvn/wrapper/maven-wrapper.properties",
        )


class GradleBuildContributor(TemplateContributor):
    """Writes the Gradle build and settings scripts plus the Gradle wrapper."""

    name = "gradle-build"
    capability = Capability.BUILD_FILE
    condition = OnBuildSystem("gradle", "groovy")
    script_suffix = ""

    def contribute(self, context: GenerationContext) -> None:
        build_script = f"build.gradle{self.script_suffix}"
        settings_script = f"settings.gradle{self.script_suffix}"
        self.render(context, f"gradle/{build_script}.j2", build_script)
        self.render(context, f"gradle/{settings_script}.j2", settings_script)
        self.render(context, "gradle/gradlew.j2", "gradlew", executable=True)
        self.render(
            context,
            "gradle/gradle-wrapper.properties.j2",
            "gradle/wrapper/gradle-wrapper.properties",
        )


class GradleKotlinDslBuildContributor(GradleBuildContributor):
    name = "gradle-kotlin-build"
    condition = OnBuildSystem("gradle", "kotlin")
    script_suffix = ".kts"
