#!/usr/bin/env python3
import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol

from prompt_toolkit.history import History

from ..config import ShellConfig
from ..errors import ExecutionFailed, UnsupportedFormat

logger = logging.getLogger(__name__)

HISTORY_LINE_PARTS = 3
EXPORT_FORMATS = ("bash", "json")


@dataclass
class HistoryEntry:
    command: str
    timestamp: datetime
    directory: str = ""

    def to_line(self) -> str:
        return f"{self.timestamp.isoformat(timespec='seconds')}|{self.directory}|{self.command}"

    @classmethod
    def from_line(cls, line: str) -> "HistoryEntry":
        parts = line.split("|", HISTORY_LINE_PARTS - 1)
        if len(parts) < HISTORY_LINE_PARTS:
            return cls(command=line, timestamp=datetime.now().astimezone())

        return cls(
            command=parts[2],
            timestamp=_parse_timestamp(parts[0]),
            directory=parts[1],
        )


def _parse_timestamp(raw: str) -> datetime:
    raw = raw.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return datetime.now().astimezone()


class HistoryStore(Protocol):
    """What the `history` builtin needs from a history backend."""

    @property
    def entries(self) -> List[HistoryEntry]: ...

    def append(self, command: str) -> None: ...

    def recent(self, count: int) -> List[HistoryEntry]: ...

    def search(self, term: str) -> List[HistoryEntry]: ...

    def clear(self) -> None: ...

    def stats(self) -> Dict[str, object]: ...

    def export(self, filename: str, fmt: str) -> None: ...


class HistoryManager:
    def __init__(self, config: ShellConfig) -> None:
        self.config = config
        self._entries: List[HistoryEntry] = []
        self._position = 0

        if config.save_history:
            try:
                self.load()
            except OSError as error:
                logger.warning("Failed to load history: %s", error)
        self.reset()

    @property
    def path(self) -> Optional[Path]:
        if not self.config.history_file:
            return None
        return Path(self.config.history_file).expanduser()

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, command: str) -> None:
        command = command.strip()
        if not command:
            return

        if not self.config.history_duplicates and self._entries:
            if self._entries[-1].command == command:
                return

        try:
            directory = os.getcwd()
        except OSError:
            directory = ""

        self._entries.append(
            HistoryEntry(
                command=command,
                timestamp=datetime.now().astimezone(),
                directory=directory,
            )
        )
        self._trim()
        self.reset()

        if self.config.save_history:
            try:
                self.save()
            except OSError as error:
                logger.warning("Failed to save history: %s", error)

    def recent(self, count: int) -> List[HistoryEntry]:
        if count <= 0:
            return []
        return self._entries[-count:]

    def search(self, term: str) -> List[HistoryEntry]:
        if not term:
            return []
        needle = term.lower()
        return [entry for entry in self._entries if needle in entry.command.lower()]

    def search_prefix(self, prefix: str) -> List[HistoryEntry]:
        if not prefix:
            return []
        prefix = prefix.lower()
        return [entry for entry in self._entries if entry.command.lower().startswith(prefix)]

    def previous(self) -> str:
        """Step back through history; stays on the oldest entry once reached."""
        if not self._entries:
            return ""
        if self._position > 0:
            self._position -= 1
        return self._entries[self._position].command

    def next(self) -> str:
        """Step forward; returns "" and parks past the newest entry at the end."""
        if self._position < len(self._entries) - 1:
            self._position += 1
            return self._entries[self._position].command
        self._position = len(self._entries)
        return ""

    def reset(self) -> None:
        self._position = len(self._entries)

    def clear(self) -> None:
        self._entries = []
        self.reset()
        if self.config.save_history and self.path is not None:
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
            except OSError as error:
                raise ExecutionFailed("history", error) from error

    def load(self) -> None:
        path = self.path
        if path is None or not path.exists():
            return

        with path.open("r", encoding="utf-8") as history_handle:
            for line in history_handle:
                line = line.strip()
                if line:
                    self._entries.append(HistoryEntry.from_line(line))
        self._trim()
        self.reset()
        logger.debug("Loaded %d history entries from %s", len(self._entries), path)

    def save(self) -> None:
        path = self.path
        if path is None:
            return

        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as history_handle:
            for entry in self._entries:
                history_handle.write(entry.to_line() + "\n")

    def stats(self) -> Dict[str, object]:
        stats: Dict[str, object] = {
            "total_entries": len(self._entries),
            "max_size": self.config.history_size,
            "save_enabled": self.config.save_history,
            "duplicates_allowed": self.config.history_duplicates,
            "unique_commands": len({entry.command for entry in self._entries}),
        }
        if self._entries:
            stats["oldest_entry"] = self._entries[0].timestamp
            stats["newest_entry"] = self._entries[-1].timestamp
        return stats

    def export(self, filename: str, fmt: str) -> None:
        if fmt not in EXPORT_FORMATS:
            raise UnsupportedFormat(fmt)

        if fmt == "bash":
            content = "".join(entry.command + "\n" for entry in self._entries)
        else:
            content = json.dumps(
                [
                    {
                        "command": entry.command,
                        "timestamp": entry.timestamp.isoformat(timespec="seconds"),
                        "directory": entry.directory,
                    }
                    for entry in self._entries
                ],
                indent=2,
            )

        try:
            with open(filename, "w", encoding="utf-8") as export_handle:
                export_handle.write(content)
        except OSError as error:
            raise ExecutionFailed("history", error) from error

    def _trim(self) -> None:
        size = self.config.history_size
        if size > 0 and len(self._entries) > size:
            self._entries = self._entries[-size:]


class ShellHistory(History):
    """prompt_toolkit history backed by a ``HistoryStore``."""

    def __init__(self, store: HistoryStore) -> None:
        super().__init__()
        self.store = store

    def load_history_strings(self) -> Iterable[str]:
        for entry in reversed(self.store.entries):
            yield entry.command

    def store_string(self, string: str) -> None:
        self.store.append(string)
