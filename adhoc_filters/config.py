"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. Explicit path argument
2. ./adhoc_filters.yaml or ./adhoc_filters.yml (working directory)
3. ~/.adhoc_filters/config.yaml (user home)

Environment variables override YAML: ADHOC_FILTERS_<SECTION>_<KEY>.
${VAR} references in YAML values resolve from environment at load time.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from adhoc_filters.classifier import UnresolvedPolicy
from adhoc_filters.errors.domain import ConfigError

logger = logging.getLogger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")
_ENV_PREFIX = "ADHOC_FILTERS_"


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class ClassifierConfig(BaseModel):
    """Classification policy."""

    on_unresolved: UnresolvedPolicy = UnresolvedPolicy.REJECT
    dedupe: bool = False

    def as_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for classify() and merge_selection()."""
        return {"on_unresolved": self.on_unresolved, "dedupe": self.dedupe}


class LoggingConfig(BaseModel):
    """Logging setup applied by configure_logging."""

    level: Literal["debug", "info", "warning", "error", "critical"] = "info"
    format: str = "%(levelname)s:%(name)s:%(message)s"

    @field_validator("level", mode="before")
    @classmethod
    def _lowercase_level(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class AdhocFiltersConfig(BaseModel):
    """Top-level configuration."""

    classifier: ClassifierConfig = ClassifierConfig()
    logging: LoggingConfig = LoggingConfig()


def _find_config_file() -> Path | None:
    candidates = [
        Path.cwd() / "adhoc_filters.yaml",
        Path.cwd() / "adhoc_filters.yml",
        Path.home() / ".adhoc_filters" / "config.yaml",
        Path.home() / ".adhoc_filters" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply ADHOC_FILTERS_<SECTION>_<KEY> env var overrides to config data.

    For example, ``ADHOC_FILTERS_CLASSIFIER_ON_UNRESOLVED=skip`` maps to
    section ``classifier``, field ``on_unresolved``.
    """
    known_sections = sorted(
        AdhocFiltersConfig.model_fields.keys(), key=len, reverse=True
    )
    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        suffix = key[len(_ENV_PREFIX):].lower()
        matched_section = None
        matched_field = None
        for section in known_sections:
            section_prefix = section + "_"
            if suffix.startswith(section_prefix):
                matched_section = section
                matched_field = suffix[len(section_prefix):]
                break
        if matched_section is None or not matched_field:
            continue
        section_data = data.setdefault(matched_section, {})
        if not isinstance(section_data, dict):
            continue
        if value.lower() in ("true", "false"):
            section_data[matched_field] = value.lower() == "true"
        else:
            section_data[matched_field] = value
    return data


def load_config(config_path: str | None = None) -> AdhocFiltersConfig | None:
    """Load configuration from YAML file with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.adhoc_filters/).

    Returns:
        Parsed and validated config, or None if no config file was found.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigError: If the config does not validate.
    """
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()
        if path is None:
            return None

    logger.info("Loading config from %s", path)

    with open(path) as f:
        raw_data = yaml.safe_load(f) or {}

    data = _resolve_env_vars_recursive(raw_data)
    data = _apply_env_overrides(data)

    try:
        return AdhocFiltersConfig(**data)
    except ValidationError as exc:
        raise ConfigError.from_code(
            "E-4002",
            details_text="; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            ),
            details={"path": str(path)},
        ) from exc


def configure_logging(config: AdhocFiltersConfig | None = None) -> None:
    """Send adhoc_filters logs to stdout at the configured level."""
    settings = (config or AdhocFiltersConfig()).logging
    level = getattr(logging, settings.level.upper())
    logging.basicConfig(
        level=level,
        format=settings.format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("adhoc_filters").setLevel(level)
