from .history_writer import HistorySequence, HistorySyncWriter

__all__ = ["HistorySequence", "HistorySyncWriter"]
