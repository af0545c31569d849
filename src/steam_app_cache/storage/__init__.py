"""
Local persistence for application records.
"""

from steam_app_cache.storage.record_store import RecordStore

__all__ = ["RecordStore"]
