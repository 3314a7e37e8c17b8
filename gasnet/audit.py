"""
Design (audit.py)
- Purpose: Append-only audit trail for every create/delete/mutation/save/load.
- Inputs: Human-readable action messages.
- Outputs: Timestamped lines in a text file; optional forwarding to listeners (UI Logs panel).
- Side effects: Opens and appends to the log file between open() and close().
- Thread-safety: Single caller (UI main thread).
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Protocol, TextIO


class AuditSink(Protocol):
    """Anything that can record one audit event."""

    def record(self, message: str) -> None: ...


class NullAudit:
    """Sink that drops every event."""

    def record(self, message: str) -> None:
        pass


class AuditLog:
    """
    Design (AuditLog)
    - State:
        path: log file location
        _file: open handle while the log is open, else None
        _listeners: callables receiving each stamped line
    - Lifecycle: open() once at process start, close() at shutdown (or use as a context manager).
      Events recorded while closed still reach the listeners.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._file: Optional[TextIO] = None
        self._listeners: List[Callable[[str], None]] = []

    def open(self) -> "AuditLog":
        if self._file is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, "a", encoding="utf-8")
        return self

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "AuditLog":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()

    def add_listener(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[str], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def record(self, message: str) -> None:
        """
        Purpose: Write one stamped line and forward it to listeners.
        Inputs: message (action description including the affected id).
        Side effects: Appends to the log file (flushed immediately).
        """
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{stamp}] {message}"
        if self._file is not None:
            self._file.write(line + "\n")
            self._file.flush()
        for listener in self._listeners:
            listener(line)
