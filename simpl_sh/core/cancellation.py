#!/usr/bin/env python3
import threading


class CancellationToken:
    """Shared stop flag threaded through external command execution."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()
