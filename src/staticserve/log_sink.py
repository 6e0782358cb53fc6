"""
Published log channel for the static server.

The startup message (and anything collaborators want to print afterwards) goes
through one of these sinks. Internal diagnostics use the ``logging`` module and
never pass through here.
"""

import sys
from typing import Any, Optional, TextIO

LOG_EVENT = "log"


class LogSink:
    """Callable log channel; subclasses decide where a message goes"""

    def __call__(self, message: str) -> None:
        self.write(message)

    def write(self, message: str) -> None:
        raise NotImplementedError


class NullSink(LogSink):
    """Drops everything (``no_log_output``)"""

    def write(self, message: str) -> None:
        return None


class ConsoleSink(LogSink):
    """Writes each message as one line on standard output"""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def write(self, message: str) -> None:
        # Resolve sys.stdout lazily so redirected/captured stdout is honored
        stream = self._stream or sys.stdout
        stream.write(f"{message}\n")
        stream.flush()


class EventSink(LogSink):
    """Forwards messages to an emitter exposing ``emit(name, payload)``"""

    def __init__(self, events: Any):
        if not callable(getattr(events, "emit", None)):
            raise TypeError(f"events sink must provide emit(name, payload), got {type(events).__name__}")
        self.events = events

    def write(self, message: str) -> None:
        self.events.emit(LOG_EVENT, message)


def make_log_sink(config) -> LogSink:
    """Pick the sink for a config: silenced, event emitter, or console"""
    if config.no_log_output:
        return NullSink()
    if config.events is not None:
        return EventSink(config.events)
    return ConsoleSink()
