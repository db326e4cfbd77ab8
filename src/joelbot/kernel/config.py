"""Bot configuration loading.

Sources, lowest precedence first: built-in defaults, deployment profile,
YAML file, environment (``.env`` is read into the environment first).

Invalid values never stop the bot: each bad field is logged and replaced by
its default. ``strict=True`` collects the same problems and raises instead.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ValidationError

from ..contracts.v1 import BotConfig, ConfigError, ScheduleConfig, TimeWindowConfig, TwitchCredentials
from ..util.conv import coerce_str_list

logger = logging.getLogger("joelbot.config")

DEFAULT_CONFIG_FILE = "joelbot.yaml"

PROFILES: Dict[str, Dict[str, Dict[str, Any]]] = {
    "standard": {
        "window": {"start": "08:45", "end": "14:00"},
        "schedule": {"inactivity_threshold_seconds": 60},
    },
    "patient": {
        "window": {"start": "08:50", "end": "14:00"},
        "schedule": {"inactivity_threshold_seconds": 600},
    },
}

M = TypeVar("M", bound=BaseModel)


def resolve_config_path(path: Optional[str], environ: Mapping[str, str]) -> Optional[Path]:
    if path:
        return Path(path).expanduser()
    env_path = str(environ.get("JOELBOT_CONFIG") or "").strip()
    if env_path:
        return Path(env_path).expanduser()
    local = Path.cwd() / DEFAULT_CONFIG_FILE
    return local if local.exists() else None


def read_config_file(path: Optional[Path]) -> Dict[str, Any]:
    if path is None:
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("config file not found: %s", path)
        return {}
    except Exception as e:
        logger.warning("config file unreadable: %s (%s)", path, e)
        return {}
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("config file is not a mapping: %s", path)
        return {}
    return raw


def _section(doc: Mapping[str, Any], key: str) -> Dict[str, Any]:
    v = doc.get(key)
    return dict(v) if isinstance(v, dict) else {}


def _yaml_clock(value: Any) -> Any:
    # YAML 1.1 reads unquoted 8:45 as the base-60 integer 525.
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value < 24 * 60:
        return f"{value // 60:02d}:{value % 60:02d}"
    return value


def _build(model: Type[M], fields: Mapping[str, Any], *, section: str, errors: List[str]) -> M:
    """Validate ``fields`` one at a time; keep the good ones, drop the bad ones."""
    accepted: Dict[str, Any] = {}
    for key, value in fields.items():
        try:
            model.model_validate({**accepted, key: value})
        except ValidationError as e:
            msg = e.errors()[0].get("msg", "invalid value") if e.errors() else "invalid value"
            errors.append(f"{section}.{key}: {msg}")
            logger.warning("invalid config %s.%s=%r, using default (%s)", section, key, value, msg)
            continue
        accepted[key] = value
    return model.model_validate(accepted)


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    channels = coerce_str_list(environ.get("JOEL_CHANNEL"))
    if channels:
        out["channels"] = channels
    message = environ.get("JOEL_MESSAGE")
    if message is not None and str(message) != "":
        out["message"] = str(message)
    for env_key, key in (("JOELBOT_LOG_LEVEL", "log_level"), ("JOELBOT_TRANSPORT", "transport")):
        v = str(environ.get(env_key) or "").strip()
        if v:
            out[key] = v.lower() if key == "transport" else v.upper()
    creds: Dict[str, Any] = {}
    if environ.get("TWITCH_USERNAME") is not None:
        creds["username"] = str(environ.get("TWITCH_USERNAME") or "")
    if environ.get("TWITCH_PASSWORD") is not None:
        creds["token"] = str(environ.get("TWITCH_PASSWORD") or "")
    if creds:
        out["credentials"] = creds
    return out


def build_config(doc: Mapping[str, Any], environ: Mapping[str, str], *, strict: bool = False) -> BotConfig:
    errors: List[str] = []

    profile_name = str(environ.get("JOELBOT_PROFILE") or doc.get("profile") or "standard").strip().lower()
    profile = PROFILES.get(profile_name)
    if profile is None:
        errors.append(f"profile: unknown profile {profile_name!r}")
        logger.warning("unknown profile %r, using 'standard'", profile_name)
        profile = PROFILES["standard"]

    env = _env_overrides(environ)

    window_fields = {**profile["window"], **_section(doc, "window")}
    for key in ("start", "end"):
        if key in window_fields:
            window_fields[key] = _yaml_clock(window_fields[key])
    schedule_fields = {**profile["schedule"], **_section(doc, "schedule")}
    cred_fields = {**_section(doc, "credentials"), **env.pop("credentials", {})}

    window = _build(TimeWindowConfig, window_fields, section="window", errors=errors)
    schedule = _build(ScheduleConfig, schedule_fields, section="schedule", errors=errors)
    credentials = _build(TwitchCredentials, cred_fields, section="credentials", errors=errors)

    top: Dict[str, Any] = {}
    for key, value in doc.items():
        if key in ("profile", "window", "schedule", "credentials"):
            continue
        top[key] = value
    top.update(env)
    cfg = _build(BotConfig, top, section="config", errors=errors)
    cfg = cfg.model_copy(update={"window": window, "schedule": schedule, "credentials": credentials})

    if strict and errors:
        raise ConfigError("; ".join(errors))
    if not cfg.credentials.username and cfg.transport == "twitch":
        logger.warning("TWITCH_USERNAME is not set; the chat server will reject the login")
    return cfg


def load_config(
    path: Optional[str] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    strict: bool = False,
) -> BotConfig:
    """Load the effective configuration.

    When ``environ`` is omitted the process environment is used, after
    loading a ``.env`` file from the working directory (existing variables win).
    """
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True), override=False)
        environ = os.environ
    cfg_path = resolve_config_path(path, environ)
    doc = read_config_file(cfg_path)
    if cfg_path is not None:
        logger.debug("config loaded from %s", cfg_path)
    return build_config(doc, environ, strict=strict)
