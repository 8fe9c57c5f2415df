from .history import HistoryEntry, HistoryManager, HistoryStore, ShellHistory

__all__ = ["HistoryEntry", "HistoryManager", "HistoryStore", "ShellHistory"]
