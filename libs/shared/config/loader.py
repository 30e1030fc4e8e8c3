from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from apps.streamer.settings import StreamerSettings
from apps.viewer.settings import ViewerSettings

ENV_PREFIX = "TVID_"
NESTED_DELIMITER = "__"

# --- paths --------------------------------------------------------------------


def _repo_root() -> Path:
    """Heuristic: walk up from this file until we find pyproject.toml."""
    p = Path(__file__).resolve()
    for ancestor in [p, *p.parents]:
        if (ancestor / "pyproject.toml").exists():
            return ancestor
    return Path.cwd()


def _profiles_dir(env: Mapping[str, str]) -> Path:
    # Allow override (useful for tests): TVID_CONFIG_DIR points *at* profiles/
    override = env.get(f"{ENV_PREFIX}CONFIG_DIR")
    if override:
        return Path(override)
    return _repo_root() / "configs" / "profiles"


def _load_profile_table(env: Mapping[str, str], profile: str) -> dict[str, Any]:
    f = _profiles_dir(env) / f"{profile}.toml"
    if not f.exists():
        return {}
    text = f.read_text("utf-8")
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise RuntimeError(f"Failed to parse profile TOML: {f}") from e


# --- env overlay helpers ------------------------------------------------------


def _coerce_env_value(raw: str) -> Any:
    """
    Try to parse JSON first (so dicts/numbers/bools work),
    then fall back to the original string.
    """
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _deep_update(base: dict[str, Any], over: Mapping[str, Any]) -> dict[str, Any]:
    """Nested tables merge key by key; anything else replaces."""
    for k, v in over.items():
        if isinstance(v, Mapping) and isinstance(base.get(k), dict):
            base[k] = _deep_update(dict(base[k]), v)
        else:
            base[k] = v
    return base


def _collect_env_for(
    defaults: Mapping[str, Any], env: Mapping[str, str], prefix: str = ENV_PREFIX
) -> dict[str, Any]:
    """
    Collect overrides like TVID_WIDTH, TVID_CONNECT -> {'width': ..., 'connect': ...}.
    Nested models take either a JSON object (TVID_CAPTURE={"device": 1}) or one
    key per field (TVID_CAPTURE__DEVICE=1). Case-insensitive after the prefix.
    """
    out: dict[str, Any] = {}
    fields = {f.lower(): f for f in defaults}
    plen = len(prefix)
    for k, v in env.items():
        if not k.startswith(prefix):
            continue
        head, _, rest = k[plen:].lower().partition(NESTED_DELIMITER)
        field = fields.get(head)
        if field is None:
            continue
        value = _coerce_env_value(v)
        if rest:
            sub = defaults[field]
            if not isinstance(sub, dict) or rest not in sub:
                continue
            value = {rest: value}
        _deep_update(out, {field: value})
    return out


def _merge(
    defaults: dict[str, Any], env: Mapping[str, str], profile: str | None, section: str
) -> dict[str, Any]:
    profile = (profile or env.get(f"{ENV_PREFIX}PROFILE") or "dev").strip()
    base = dict(defaults)

    # TOML overlay
    toml_table = _load_profile_table(env, profile)
    toml_section = toml_table.get(section, {}) if isinstance(toml_table, dict) else {}
    if isinstance(toml_section, dict):
        _deep_update(base, toml_section)

    # env overlay
    _deep_update(base, _collect_env_for(defaults, env))
    return base


# --- public API ---------------------------------------------------------------


def load_streamer_settings(
    env: Mapping[str, str] | None = None, profile: str | None = None
) -> StreamerSettings:
    """
    Merge defaults (StreamerSettings) <- TOML [streamer] <- env TVID_*.
    Env examples: TVID_LISTEN=tcp://0.0.0.0:3012, TVID_WIDTH=200,
    TVID_CAPTURE={"adapter":"mss","monitor":2}
    """
    env = os.environ if env is None else env
    base = _merge(StreamerSettings().model_dump(), env, profile, "streamer")
    return StreamerSettings.model_validate(base)


def load_viewer_settings(
    env: Mapping[str, str] | None = None, profile: str | None = None
) -> ViewerSettings:
    """
    Merge defaults (ViewerSettings) <- TOML [viewer] <- env TVID_*.
    Env examples: TVID_MODE=local, TVID_CONNECT=tcp://10.0.0.5:3012, TVID_SEND_VIDEO=true
    """
    env = os.environ if env is None else env
    base = _merge(ViewerSettings().model_dump(), env, profile, "viewer")
    return ViewerSettings.model_validate(base)
