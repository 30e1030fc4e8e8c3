from .fakes import FakeConnection
from .zmq import ZmqConnection, endpoint

__all__ = ["FakeConnection", "ZmqConnection", "endpoint"]
