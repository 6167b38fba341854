"""Startup configuration for the extraction engine.

Settings are resolved once at process start from an optional YAML file and
``METAPARSE_*`` environment variables, then passed explicitly to the
extractors. Non-strict mode logs and falls back to defaults on bad input;
strict mode raises ``ConfigValidationError``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "METAPARSE_"
DEFAULT_MAX_DATA_DEPTH = 64


class ConfigValidationError(RuntimeError):
    """Raised when strict startup validation fails."""


@dataclass(frozen=True)
class ExtractionSettings:
    """Runtime knobs injected into the script/style extractors.

    Attributes:
        max_workers: Size of the batch worker pool. ``None`` means
            ``os.cpu_count()``.
        max_data_depth: Nesting depth after which ``data`` recursion stops.
        scan_events: Whether the advisory event pass runs for components.
        event_trigger_method: Method name of ``this.<name>("event")`` calls.
        guess_wrapped_registrations: Accept ``Page(wrap({...}))`` and
            ``myComponent({...})`` style registrations.
        follow_css_imports: Whether CSS batches walk the import closure.
    """

    max_workers: Optional[int] = None
    max_data_depth: int = DEFAULT_MAX_DATA_DEPTH
    scan_events: bool = True
    event_trigger_method: str = "triggerEvent"
    guess_wrapped_registrations: bool = True
    follow_css_imports: bool = True

    def resolved_workers(self) -> int:
        return self.max_workers or os.cpu_count() or 1


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``METAPARSE_STRICT_CONFIG_VALIDATION``."""
    return _env_flag(f"{ENV_PREFIX}STRICT_CONFIG_VALIDATION", default=default)


def _fail(msg: str, strict: bool) -> None:
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; using default", msg)


def _coerce(name: str, raw: Any, expected: type, strict: bool) -> Any:
    """Coerce a raw YAML/env value to the field type, or return ``None``."""
    if expected is bool:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str) and raw.strip().lower() in {"1", "true", "yes", "on"}:
            return True
        if isinstance(raw, str) and raw.strip().lower() in {"0", "false", "no", "off"}:
            return False
        _fail(f"Setting '{name}' must be a boolean, got {raw!r}", strict)
        return None
    if expected is int:
        if isinstance(raw, bool):
            _fail(f"Setting '{name}' must be an integer, got {raw!r}", strict)
            return None
        try:
            value = int(raw)
        except (TypeError, ValueError):
            _fail(f"Setting '{name}' must be an integer, got {raw!r}", strict)
            return None
        if value < 1:
            _fail(f"Setting '{name}' must be >= 1, got {value}", strict)
            return None
        return value
    if not isinstance(raw, str) or not raw.strip():
        _fail(f"Setting '{name}' must be a non-empty string, got {raw!r}", strict)
        return None
    return raw.strip()


_FIELD_TYPES: dict[str, type] = {
    "max_workers": int,
    "max_data_depth": int,
    "scan_events": bool,
    "event_trigger_method": str,
    "guess_wrapped_registrations": bool,
    "follow_css_imports": bool,
}


def load_settings_file(config_path: str, strict: bool = False) -> dict[str, Any]:
    """Load the YAML settings mapping.

    In non-strict mode this returns an empty dict on read/parse failures.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        msg = f"Settings file not found: {config_path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse settings YAML at {config_path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        return {}

    if not isinstance(payload, dict):
        msg = f"Unexpected settings payload type: {type(payload).__name__}"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; continuing with defaults", msg)
        return {}

    # Settings may be nested under an ``extraction`` section.
    section = payload.get("extraction", payload)
    if not isinstance(section, dict):
        _fail("'extraction' section must be a mapping", strict)
        return {}
    return section


def build_settings(
    values: dict[str, Any],
    base: Optional[ExtractionSettings] = None,
    strict: bool = False,
) -> ExtractionSettings:
    """Validate ``values`` and overlay them onto ``base``."""
    settings = base or ExtractionSettings()
    known = {f.name for f in fields(ExtractionSettings)}
    updates: dict[str, Any] = {}
    for name, raw in values.items():
        if name not in known:
            _fail(f"Unknown setting '{name}'", strict)
            continue
        if raw is None:
            continue
        value = _coerce(name, raw, _FIELD_TYPES[name], strict)
        if value is not None:
            updates[name] = value
    return replace(settings, **updates)


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for name in _FIELD_TYPES:
        raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            overrides[name] = raw
    return overrides


def load_extraction_settings(
    config_path: Optional[str] = None,
    strict: Optional[bool] = None,
) -> ExtractionSettings:
    """Resolve settings from YAML file and environment (env wins)."""
    load_dotenv()
    if strict is None:
        strict = resolve_strict_config_validation()

    settings = ExtractionSettings()
    if config_path:
        settings = build_settings(load_settings_file(config_path, strict), settings, strict)
    settings = build_settings(_env_overrides(), settings, strict)
    logger.debug("Resolved extraction settings: %s", settings)
    return settings
