"""Configuration resolution for the meeting audit.

Each setting is folded over, in order: CLI argument > environment
(``MEETING_AUDIT_*``) > YAML config file > INI profile section in
``credentials.ini`` > built-in default.
"""
from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import (
    DEFAULT_CALENDAR_ID,
    DEFAULT_LOOKAHEAD_DAYS,
    DEFAULT_SCHEDULE_HOUR,
    DEFAULT_SCHEDULE_MINUTE,
    ENV_PREFIX,
    INI_SECTION,
    credential_ini_paths,
    default_config_path,
    default_credentials_path,
    default_token_path,
)
from .errors import ConfigError

LOG = logging.getLogger(__name__)


def _require_yaml():
    try:
        import yaml  # type: ignore

        return yaml
    except ImportError as exc:  # pragma: no cover - runtime guard
        raise ConfigError("PyYAML not installed.", hint="Run: pip install pyyaml") from exc


def load_yaml(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML mapping; returns {} if the file is missing or empty."""
    if not path:
        return {}
    p = Path(os.path.expanduser(path))
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    yaml = _require_yaml()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {p}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level YAML in {p} must be a mapping")
    return data


def _read_ini_section(profile: Optional[str]) -> Dict[str, str]:
    """Merge ``[meeting_audit]`` and ``[meeting_audit.<profile>]`` across INI paths.

    Earlier paths win; the profile section overrides the base section.
    """
    base: Dict[str, str] = {}
    prof: Dict[str, str] = {}
    for p in credential_ini_paths():
        if not os.path.exists(p):
            continue
        cp = configparser.ConfigParser()
        try:
            cp.read(p)
        except configparser.Error as exc:
            LOG.warning("Skipping unreadable INI %s: %s", p, exc)
            continue
        if cp.has_section(INI_SECTION):
            for k, v in cp.items(INI_SECTION):
                base.setdefault(k, v)
        if profile and cp.has_section(f"{INI_SECTION}.{profile}"):
            for k, v in cp.items(f"{INI_SECTION}.{profile}"):
                prof.setdefault(k, v)
    return {**base, **prof}


@dataclass
class AuditConfig:
    calendar_id: str = DEFAULT_CALENDAR_ID
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS
    recipient: Optional[str] = None
    credentials: Optional[str] = None
    token: Optional[str] = None
    schedule_hour: int = DEFAULT_SCHEDULE_HOUR
    schedule_minute: int = DEFAULT_SCHEDULE_MINUTE
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        self.credentials = os.path.expanduser(self.credentials or default_credentials_path())
        self.token = os.path.expanduser(self.token or default_token_path())
        if self.log_file:
            self.log_file = os.path.expanduser(self.log_file)

    def validate(self) -> "AuditConfig":
        if self.lookahead_days < 1:
            raise ConfigError(f"lookahead_days must be positive, got {self.lookahead_days}")
        if not 0 <= self.schedule_hour <= 23:
            raise ConfigError(f"schedule_hour must be within 0..23, got {self.schedule_hour}")
        if not 0 <= self.schedule_minute <= 59:
            raise ConfigError(f"schedule_minute must be within 0..59, got {self.schedule_minute}")
        if not self.calendar_id:
            raise ConfigError("calendar_id must not be empty")
        return self


_INT_FIELDS = {"lookahead_days", "schedule_hour", "schedule_minute"}


def _coerce(name: str, value: Any) -> Any:
    if name not in _INT_FIELDS:
        return str(value)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc


def load_config(
    *,
    config_path: Optional[str] = None,
    profile: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> AuditConfig:
    """Resolve an AuditConfig from overrides, env, YAML, INI, and defaults."""
    explicit_path = config_path or os.environ.get(f"{ENV_PREFIX}CONFIG")
    path = explicit_path or default_config_path()
    if explicit_path and not Path(os.path.expanduser(explicit_path)).exists():
        raise ConfigError(f"Config file not found: {explicit_path}")
    yaml_data = load_yaml(path)
    ini_data = _read_ini_section(profile)
    overrides = overrides or {}

    values: Dict[str, Any] = {}
    for f in fields(AuditConfig):
        name = f.name
        candidates = (
            overrides.get(name),
            os.environ.get(f"{ENV_PREFIX}{name.upper()}"),
            yaml_data.get(name),
            ini_data.get(name),
        )
        for value in candidates:
            if value is not None and value != "":
                values[name] = _coerce(name, value)
                break
    cfg = AuditConfig(**values)
    LOG.debug("Resolved config (file=%s, profile=%s): %s", path, profile, cfg)
    return cfg.validate()
