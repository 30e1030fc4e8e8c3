from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from shared.contracts.v1.stream import StreamGeometry


class CaptureSettings(BaseModel):
    adapter: Literal["opencv", "mss"] = "opencv"
    device: int = 0  # camera index (opencv)
    monitor: int = 1  # screen index (mss)
    target_fps: float = 30.0  # mss throttle only
    idle_ms: float = 5.0  # producer pause between iterations


class StreamerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TVID_", extra="ignore")

    width: int = Field(default=160, gt=0)
    height: int = Field(default=48, gt=0)
    capture: CaptureSettings = CaptureSettings()

    # choose transport impl
    channel_impl: Literal["inproc", "zmq"] = "zmq"

    listen: str = "tcp://127.0.0.1:3012"
    accept_timeout_ms: int | None = None  # None: wait for a viewer forever
    poll_ms: int = 5

    def geometry(self) -> StreamGeometry:
        return StreamGeometry(width=self.width, height=self.height)
