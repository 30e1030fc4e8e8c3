from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from shared.contracts.v1.stream import StreamGeometry

from apps.streamer.settings import CaptureSettings


class ViewerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TVID_", extra="ignore")

    # local: capture and render in this process; remote: render a streamer's frames
    mode: Literal["local", "remote"] = "remote"
    send_video: bool = False  # remote mode: also stream our own camera back

    width: int = Field(default=160, gt=0)
    height: int = Field(default=48, gt=0)
    capture: CaptureSettings = CaptureSettings()

    channel_impl: Literal["inproc", "zmq"] = "zmq"
    connect: str = "tcp://127.0.0.1:3012"
    connect_timeout_ms: int = 2000
    poll_ms: int = 5

    tick_ms: float = Field(default=10.0, gt=0)
    marker: Literal["dot", "block"] = "dot"

    def geometry(self) -> StreamGeometry:
        return StreamGeometry(width=self.width, height=self.height)
