"""initforge configuration.

Centralised, typed configuration for the generation engine. All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field


class DescriptionDefaults(BaseModel):
    """Values used by ``build_description`` when a request omits a field."""

    group_id: str = Field(default="com.example")
    artifact_id: str = Field(default="demo")
    version: str = Field(default="0.0.1-SNAPSHOT")
    name: str = Field(default="demo")
    description: str = Field(default="Demo project for Spring Boot")
    language: str = Field(default="java")
    java_version: str = Field(default="17")
    build_system: str = Field(default="maven")
    build_dialect: str = Field(default="groovy")
    packaging: str = Field(default="jar")
    platform_version: str = Field(default="3.2.1")


class GeneratorConfig(BaseModel):
    """Global initforge configuration.

    Instances are typically created once by the hosting application and then
    shared, read-only, by every generation request.
    """

    defaults: DescriptionDefaults = Field(default_factory=DescriptionDefaults)
    generation_timeout: float = Field(
        default=30.0, gt=0, description="Per-request deadline in seconds"
    )
    archive_format: str = Field(default="zip", description="Archive format used by generate_from_request when none is given")
    catalog_path: Optional[Path] = Field(
        default=None, description="YAML metadata catalog; the bundled catalog is used when unset"
    )
    template_dir: Optional[Path] = Field(
        default=None, description="Override directory for the Jinja2 templates"
    )
    log_level: str = Field(default="INFO", description="Level used by configure_logging when none is given")

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "GeneratorConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            INITFORGE_TIMEOUT, INITFORGE_ARCHIVE_FORMAT, INITFORGE_CATALOG,
            INITFORGE_TEMPLATE_DIR, INITFORGE_LOG_LEVEL,
            INITFORGE_DEFAULT_GROUP_ID, INITFORGE_DEFAULT_ARTIFACT_ID,
            INITFORGE_DEFAULT_LANGUAGE, INITFORGE_DEFAULT_JAVA_VERSION,
            INITFORGE_DEFAULT_BUILD_SYSTEM, INITFORGE_DEFAULT_PACKAGING,
            INITFORGE_DEFAULT_PLATFORM_VERSION.
        """
        defaults_kwargs: dict[str, Any] = {}
        for key in (
            "group_id",
            "artifact_id",
            "language",
            "java_version",
            "build_system",
            "packaging",
            "platform_version",
        ):
            value = os.environ.get(f"INITFORGE_DEFAULT_{key.upper()}")
            if value:
                defaults_kwargs[key] = value

        kwargs: dict[str, Any] = {}
        if os.environ.get("INITFORGE_TIMEOUT"):
            kwargs["generation_timeout"] = float(os.environ["INITFORGE_TIMEOUT"])
        if os.environ.get("INITFORGE_ARCHIVE_FORMAT"):
            kwargs["archive_format"] = os.environ["INITFORGE_ARCHIVE_FORMAT"]
        if os.environ.get("INITFORGE_CATALOG"):
            kwargs["catalog_path"] = Path(os.environ["INITFORGE_CATALOG"])
        if os.environ.get("INITFORGE_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["INITFORGE_TEMPLATE_DIR"])
        if os.environ.get("INITFORGE_LOG_LEVEL"):
            kwargs["log_level"] = os.environ["INITFORGE_LOG_LEVEL"]

        return cls(defaults=DescriptionDefaults(**defaults_kwargs), **kwargs)
