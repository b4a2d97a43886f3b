"""
Adapters layer - File-backed schedule and booking lookups.
"""

from .file_store import BookingRecord, FileScheduleStore, ScheduleRecord

__all__ = ["BookingRecord", "FileScheduleStore", "ScheduleRecord"]
