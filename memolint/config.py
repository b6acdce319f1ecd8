"""
Analyzer configuration: rule settings and which rules are enabled.

Settings come from the `[tool.memolint]` table of the nearest
`pyproject.toml` (searching upwards from the analyzed path) and can be
overridden from the CLI:

    [tool.memolint]
    enforced_style_for_leading_underscores = "required"

Invalid values fail here, before any file is analyzed.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from memolint.memoization.naming import NamingPolicy, Style
from memolint.rules.base import Rule
from memolint.rules.memoized_instance_variable_name import MemoizedInstanceVariableNameRule

logger = logging.getLogger(__name__)

TOOL_SECTION = "memolint"


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or fails validation."""


class MemoizedNameSettings(BaseModel):
    """Settings for the memoized instance variable naming rule."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    enforced_style_for_leading_underscores: Style = Field(
        Style.DISALLOWED,
        alias="EnforcedStyleForLeadingUnderscores",
        description="Leading underscore convention: disallowed, required or optional.",
    )

    def policy(self) -> NamingPolicy:
        return NamingPolicy(self.enforced_style_for_leading_underscores)


@dataclass
class Config:
    """Enabled rules plus the settings they were built from."""

    rules: Sequence[Rule] = field(default_factory=list)
    settings: MemoizedNameSettings = field(default_factory=MemoizedNameSettings)


def _find_tool_table(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
    """
    Search start_path and its parents for pyproject.toml and return the
    `[tool.memolint]` table with the file it came from.
    """
    current = start_path.resolve()
    if current.is_file():
        current = current.parent

    for parent in [current, *current.parents]:
        toml_path = parent / "pyproject.toml"
        if not toml_path.is_file():
            continue
        try:
            with open(toml_path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Cannot read {toml_path}: {e}") from e
        table = data.get("tool", {}).get(TOOL_SECTION)
        if table is None:
            continue
        if not isinstance(table, dict):
            raise ConfigError(f"[tool.{TOOL_SECTION}] in {toml_path} must be a table")
        return table, toml_path

    return {}, None


def validate_settings(raw: Dict[str, Any], origin: str = "<settings>") -> MemoizedNameSettings:
    """Validate a raw settings mapping; unknown keys or styles raise ConfigError."""
    try:
        return MemoizedNameSettings.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {origin}: {e}") from e


def load_settings(search_path: Optional[Path] = None) -> MemoizedNameSettings:
    """Load settings from the nearest pyproject.toml, or defaults if none has them."""
    start = search_path or Path.cwd()
    table, toml_path = _find_tool_table(start)
    if toml_path is None:
        logger.debug("No [tool.%s] table found from %s; using defaults", TOOL_SECTION, start)
        return MemoizedNameSettings()
    settings = validate_settings(table, origin=str(toml_path))
    logger.info(
        "Loaded settings from %s: style=%s",
        toml_path,
        settings.enforced_style_for_leading_underscores.value,
    )
    return settings


def get_default_config(
    style: Optional[Style] = None,
    search_path: Optional[Path] = None,
) -> Config:
    """
    Return the configuration with all implemented rules.

    style overrides the style found in pyproject.toml.
    """
    settings = load_settings(search_path)
    if style is not None:
        settings = validate_settings(
            {"enforced_style_for_leading_underscores": style},
            origin="command line",
        )
    rules: List[Rule] = [
        MemoizedInstanceVariableNameRule(policy=settings.policy()),
    ]
    return Config(rules=rules, settings=settings)


def get_enabled_rules(config: Config | None = None) -> Sequence[Rule]:
    """Return the list of enabled rules from the given config (or default config)."""
    if config is None:
        config = get_default_config()
    return config.rules
