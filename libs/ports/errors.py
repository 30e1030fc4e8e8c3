from __future__ import annotations

# Kept in ports so adapters and apps share one taxonomy (no domain dependency).


class StreamError(Exception):
    """Base for every failure raised across a port boundary."""


class DeviceUnavailable(StreamError):
    """Capture device cannot be opened. Fatal at startup."""


class ReadError(StreamError):
    """A single frame read failed. Retryable on the next tick."""


class ChannelError(StreamError):
    pass


class ListenError(ChannelError):
    pass


class ConnectError(ChannelError):
    pass


class ConnectionClosed(StreamError):
    """Peer went away or the link errored; the owning loop must close and exit."""


class FrameSizeError(StreamError, ValueError):
    pass
