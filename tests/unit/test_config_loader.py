from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError
from shared.config.loader import (
    load_streamer_settings,
    load_viewer_settings,
)


def _write_profile(dirpath: Path, name: str, text: str) -> Path:
    dirpath.mkdir(parents=True, exist_ok=True)
    p = dirpath / f"{name}.toml"
    p.write_text(text, encoding="utf-8")
    return p


def test_streamer_defaults_when_no_profile_and_no_env(tmp_path: Path):
    # Empty profiles dir; no overrides → model defaults
    env = {"TVID_CONFIG_DIR": str(tmp_path)}
    s = load_streamer_settings(env=env, profile="dev")
    assert (s.width, s.height) == (160, 48)
    assert s.channel_impl == "zmq"
    assert s.listen == "tcp://127.0.0.1:3012"
    assert s.capture.adapter == "opencv"
    assert s.geometry().frame_bytes == 160 * 48 * 3


def test_viewer_defaults_when_no_profile_and_no_env(tmp_path: Path):
    env = {"TVID_CONFIG_DIR": str(tmp_path)}
    s = load_viewer_settings(env=env, profile="dev")
    assert s.mode == "remote"
    assert s.send_video is False
    assert s.tick_ms == 10.0
    assert s.connect_timeout_ms == 2000
    assert s.marker == "dot"


def test_shipped_dev_profile_loads():
    s = load_viewer_settings(env={}, profile="dev")
    assert s.connect.startswith("tcp://")
    assert s.width > 0 and s.height > 0


def test_streamer_toml_overlay_with_capture_table(tmp_path: Path):
    profiles = tmp_path / "profiles"
    _write_profile(
        profiles,
        "dev",
        """
        [streamer]
        listen = "tcp://0.0.0.0:4000"
        width = 720
        height = 180

        [streamer.capture]
        adapter = "mss"
        monitor = 2
        """,
    )

    env = {
        "TVID_CONFIG_DIR": str(profiles),
        "TVID_PROFILE": "dev",
    }
    s = load_streamer_settings(env=env)
    assert s.listen.endswith(":4000")
    assert (s.width, s.height) == (720, 180)
    assert s.capture.adapter == "mss"
    assert s.capture.monitor == 2
    # unspecified capture fields keep their defaults
    assert s.capture.idle_ms == 5.0


def test_viewer_env_overrides_toml(tmp_path: Path):
    profiles = tmp_path / "profiles"
    _write_profile(
        profiles,
        "dev",
        """
        [viewer]
        mode = "remote"
        connect = "tcp://10.0.0.5:3012"
        tick_ms = 20.0
        """,
    )

    env: dict[str, Any] = {
        "TVID_CONFIG_DIR": str(profiles),
        "TVID_PROFILE": "dev",
        # Flat TVID_* keys override TOML
        "TVID_MODE": "local",
        "TVID_TICK_MS": "15",  # numeric string → number
        "TVID_send_video": "true",  # case-insensitive after the prefix
        "TVID_CAPTURE": '{"adapter": "mss", "monitor": 3}',
    }
    s = load_viewer_settings(env=env)
    assert s.mode == "local"
    assert s.tick_ms == 15.0
    assert s.send_video is True
    assert s.connect == "tcp://10.0.0.5:3012"
    assert s.capture.adapter == "mss"
    assert s.capture.monitor == 3


def test_sections_do_not_leak_between_apps(tmp_path: Path):
    profiles = tmp_path / "profiles"
    _write_profile(
        profiles,
        "dev",
        """
        [streamer]
        width = 320

        [viewer]
        width = 80
        """,
    )
    env = {"TVID_CONFIG_DIR": str(profiles)}
    assert load_streamer_settings(env=env).width == 320
    assert load_viewer_settings(env=env).width == 80


def test_profile_dir_override_via_env(tmp_path: Path):
    profiles = tmp_path / "custom_profiles"
    _write_profile(
        profiles,
        "lab",
        """
        [viewer]
        connect = "tcp://192.168.1.20:3012"
        """,
    )

    env = {
        "TVID_CONFIG_DIR": str(profiles),
        "TVID_PROFILE": "lab",
    }
    s = load_viewer_settings(env=env)
    assert s.connect == "tcp://192.168.1.20:3012"


def test_bad_toml_raises_runtime_error(tmp_path: Path):
    profiles = tmp_path / "profiles"
    (profiles / "dev.toml").parent.mkdir(parents=True, exist_ok=True)
    (profiles / "dev.toml").write_text("[viewer]\nthis = not_valid\n", encoding="utf-8")

    env = {"TVID_CONFIG_DIR": str(profiles), "TVID_PROFILE": "dev"}

    with pytest.raises(RuntimeError):
        _ = load_viewer_settings(env=env)


def test_invalid_value_is_a_validation_error(tmp_path: Path):
    env = {"TVID_CONFIG_DIR": str(tmp_path), "TVID_WIDTH": "0"}
    with pytest.raises(ValidationError):
        load_streamer_settings(env=env)


def test_nested_capture_keys_merge_over_toml(tmp_path: Path):
    profiles = tmp_path / "profiles"
    _write_profile(
        profiles,
        "dev",
        """
        [streamer.capture]
        adapter = "mss"
        monitor = 2
        """,
    )
    env = {
        "TVID_CONFIG_DIR": str(profiles),
        "TVID_CAPTURE__TARGET_FPS": "12.5",
        "TVID_CAPTURE__NOT_A_FIELD": "1",  # ignored
    }
    s = load_streamer_settings(env=env)
    # TOML keys survive a partial env override of the same table
    assert s.capture.adapter == "mss"
    assert s.capture.monitor == 2
    assert s.capture.target_fps == 12.5
