from .config import ServerConfig
from .log_sink import ConsoleSink, EventSink, LogSink, NullSink, make_log_sink
from .server import (
    PortsExhaustedError,
    ServerBootstrap,
    ServerHandle,
    serve_forever,
    start,
    start_server,
)
from .static_files import mount_static

__all__ = [
    "ConsoleSink",
    "EventSink",
    "LogSink",
    "NullSink",
    "PortsExhaustedError",
    "ServerBootstrap",
    "ServerConfig",
    "ServerHandle",
    "make_log_sink",
    "mount_static",
    "serve_forever",
    "start",
    "start_server",
]
