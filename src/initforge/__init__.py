"""initforge: conditional assembly of JVM project skeletons."""

from .archive import Packager
from .catalog import MetadataCatalog
from .conditions import (
    ALWAYS,
    AllOf,
    AnyOf,
    Not,
    OnBuildSystem,
    OnDependency,
    OnFacet,
    OnLanguage,
    OnPackaging,
    OnPlatformVersion,
    Predicate,
)
from .config import GeneratorConfig
from .description import ProjectDescription
from .description.builder import build_description, validate_description
from .errors import GenerationError
from .project.generator import GenerationResult, ProjectGenerator
from .registry import Capability, Contributor, ContributorRegistry, FunctionContributor
from .utils import configure_logging

__version__ = "0.1.0"

__all__ = [
    "ALWAYS",
    "AllOf",
    "AnyOf",
    "Capability",
    "Contributor",
    "ContributorRegistry",
    "FunctionContributor",
    "GenerationError",
    "GenerationResult",
    "GeneratorConfig",
    "MetadataCatalog",
    "Not",
    "OnBuildSystem",
    "OnDependency",
    "OnFacet",
    "OnLanguage",
    "OnPackaging",
    "OnPlatformVersion",
    "Packager",
    "Predicate",
    "ProjectDescription",
    "ProjectGenerator",
    "build_description",
    "configure_logging",
    "validate_description",
]
