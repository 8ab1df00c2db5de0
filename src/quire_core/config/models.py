"""Quire configuration data models."""

from dataclasses import dataclass, field
from typing import Any

from quire_core.logging import LogConfig
from quire_core.types import Severity


@dataclass
class TemplateConfig:
    """Template engine configuration."""

    templates_dir: str = "./src/templates"
    partials_dir: str = "partials"  # Relative to templates_dir

    # Iteration ceilings; the only termination guarantee for cyclic templates
    max_partial_substitutions: int = 50
    max_each_iterations: int = 100
    max_conditional_iterations: int = 100

    strict: bool = False  # render() raises on diagnostics >= strict_severity
    strict_severity: Severity = Severity.WARNING


@dataclass
class BuildConfig:
    """Site build configuration."""

    pages_dir: str = "./src/md"
    output_dir: str = "./public"
    default_layout: str = "default"  # Used when a page sets no theme
    site: dict[str, Any] = field(default_factory=dict)  # Global page data


@dataclass
class QuireConfig:
    """Complete Quire configuration."""

    templates: TemplateConfig = field(default_factory=TemplateConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    logging: LogConfig = field(default_factory=LogConfig)
