"""Build and validate ``ProjectDescription`` instances.

``build_description`` turns a raw request mapping (as produced by an HTTP or
CLI layer) into a frozen description, filling blanks from the configured
defaults.  ``validate_description`` is a dry-run check returning every
violation found instead of stopping at the first one.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from ..catalog import MetadataCatalog
from ..config import DescriptionDefaults, GeneratorConfig
from ..errors import InvalidDescriptionError, InvalidPathError
from ..utils import (
    clean_package_segment,
    is_java_identifier,
    is_java_package,
    normalize_path,
    to_pascal,
)
from .models import BuildDialect, BuildSystem, Language, ProjectDescription
from .version import Version

# Project "type" shortcuts understood by the request layer.
_PROJECT_TYPES: dict[str, tuple[str, str]] = {
    "maven-project": ("maven", "groovy"),
    "maven-build": ("maven", "groovy"),
    "gradle-project": ("gradle", "groovy"),
    "gradle-build": ("gradle", "groovy"),
    "gradle-project-kotlin": ("gradle", "kotlin"),
    "gradle-build-kotlin": ("gradle", "kotlin"),
}

# raw key -> description field
_ALIASES: dict[str, str] = {
    "groupId": "group_id",
    "artifactId": "artifact_id",
    "packageName": "package_name",
    "applicationName": "application_name",
    "javaVersion": "java_version",
    "bootVersion": "platform_version",
    "platformVersion": "platform_version",
    "buildSystem": "build_system",
    "buildDialect": "build_dialect",
    "baseDir": "base_directory",
    "baseDirectory": "base_directory",
}

_MIN_JAVA_FOR_PLATFORM_3 = 17


# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------


def build_description(
    raw_request: Mapping[str, Any],
    config: GeneratorConfig | None = None,
) -> ProjectDescription:
    """Create a ``ProjectDescription`` from a raw request mapping.

    Accepts both camelCase request keys (``groupId``, ``bootVersion``...) and
    snake_case field names.  Values are not validated beyond what the model
    enforces; call :func:`validate_description` for a full check.

    Raises:
        InvalidDescriptionError: If an enumerated value (language, build
            system, dialect, project type) is not recognised.
    """
    defaults = (config or GeneratorConfig()).defaults
    raw = _normalise_keys(raw_request)

    violations: list[str] = []

    build_system = _text(raw.get("build_system"))
    build_dialect = _text(raw.get("build_dialect"))
    project_type = _text(raw.get("type"))
    if project_type:
        if project_type not in _PROJECT_TYPES:
            violations.append(f"Unknown project type '{project_type}'")
        else:
            build_system, build_dialect = _PROJECT_TYPES[project_type]

    language = _parse_enum(Language, raw.get("language") or defaults.language, "language", violations)
    build = _parse_enum(BuildSystem, build_system or defaults.build_system, "build system", violations)
    dialect = _parse_enum(BuildDialect, build_dialect or defaults.build_dialect, "build dialect", violations)
    if violations:
        raise InvalidDescriptionError(violations)

    group_id = _text(raw.get("group_id")) or defaults.group_id
    artifact_id = _text(raw.get("artifact_id")) or defaults.artifact_id
    name = _text(raw.get("name")) or artifact_id or defaults.name
    package_name = _text(raw.get("package_name")) or derive_package_name(group_id, artifact_id)
    application_name = _text(raw.get("application_name")) or derive_application_name(name)

    return ProjectDescription(
        group_id=group_id,
        artifact_id=artifact_id,
        version=_text(raw.get("version")) or defaults.version,
        name=name,
        description=_text(raw.get("description")) or defaults.description,
        package_name=package_name,
        application_name=application_name,
        language=language,
        java_version=_text(raw.get("java_version")) or defaults.java_version,
        build_system=build,
        build_dialect=dialect,
        packaging=_text(raw.get("packaging")) or defaults.packaging,
        platform_version=_text(raw.get("platform_version")) or defaults.platform_version,
        dependencies=_dependency_list(raw.get("dependencies") or raw.get("style")),
        base_directory=_text(raw.get("base_directory")) or None,
    )


def derive_package_name(group_id: str, artifact_id: str) -> str:
    """Derive a root package from the coordinates.

    ``("com.example", "my-demo")`` -> ``"com.example.mydemo"``.
    """
    segments = [
        clean_package_segment(part)
        for part in f"{group_id}.{artifact_id}".split(".")
    ]
    return ".".join(segment for segment in segments if segment)


def derive_application_name(name: str) -> str:
    """Derive the main class name from the project name.

    ``"my demo"`` -> ``"MyDemoApplication"``; names that cannot form a valid
    identifier fall back to ``"Application"``.
    """
    candidate = to_pascal(name)
    if candidate and not candidate.endswith("Application"):
        candidate += "Application"
    if not is_java_identifier(candidate):
        return "Application"
    return candidate


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_description(
    description: ProjectDescription,
    catalog: Optional[MetadataCatalog] = None,
) -> list[str]:
    """Return every violation found in *description* (empty when valid).

    Pure: performs no I/O and never raises for a constructed description.
    """
    violations: list[str] = []

    for field_name in (
        "group_id",
        "artifact_id",
        "package_name",
        "application_name",
        "packaging",
        "platform_version",
        "java_version",
    ):
        if not str(getattr(description, field_name) or "").strip():
            violations.append(f"'{field_name}' must not be empty")

    if description.package_name and not is_java_package(description.package_name):
        violations.append(f"Invalid package name '{description.package_name}'")
    if description.application_name and not is_java_identifier(description.application_name):
        violations.append(f"Invalid application name '{description.application_name}'")

    platform = Version.safe_parse(description.platform_version)
    if description.platform_version and platform is None:
        violations.append(f"Invalid platform version '{description.platform_version}'")

    if description.java_version:
        if not description.java_version.isdigit():
            violations.append(f"Invalid Java version '{description.java_version}'")
        elif platform is not None and platform.major >= 3 and int(description.java_version) < _MIN_JAVA_FOR_PLATFORM_3:
            violations.append(
                f"Java {description.java_version} is not supported by platform "
                f"{description.platform_version} (requires {_MIN_JAVA_FOR_PLATFORM_3} or later)"
            )

    if description.base_directory and not _is_single_directory(description.base_directory):
        violations.append(f"Invalid base directory '{description.base_directory}'")

    if catalog is not None:
        violations.extend(_catalog_violations(description, catalog))

    return violations


def _is_single_directory(value: str) -> bool:
    try:
        return "/" not in normalize_path(value)
    except InvalidPathError:
        return False


def _catalog_violations(description: ProjectDescription, catalog: MetadataCatalog) -> list[str]:
    violations: list[str] = []
    unknown = [dep for dep in description.dependencies if catalog.resolve_dependency(dep) is None]
    if unknown:
        violations.append(f"Unknown dependencies: {', '.join(unknown)}")
    if Version.safe_parse(description.platform_version) is None:
        return violations
    for dependency_id in description.dependencies:
        dep = catalog.resolve_dependency(dependency_id)
        if dep is not None and not dep.is_compatible_with(description.platform_version):
            violations.append(
                f"Dependency '{dependency_id}' is not compatible with platform "
                f"{description.platform_version} (requires {dep.compatibility_range})"
            )
    return violations


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _normalise_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    normalised: dict[str, Any] = {}
    for key, value in raw.items():
        normalised[_ALIASES.get(key, key)] = value
    return normalised


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_enum(enum_cls, value: Any, label: str, violations: list[str]):
    text = _text(value).lower()
    try:
        return enum_cls(text)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        violations.append(f"Unknown {label} '{text}' (expected one of: {allowed})")
        return None


def _dependency_list(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(item) for item in value]
    return tuple(item.strip() for item in items if item.strip())
