"""
Catalog management.

Keeps the local record store in sync with Steam, answers name and id
lookups, and reconciles DLC lists from the storefront and SteamDB.
"""

from steam_app_cache.catalog.dlc import DlcReconciler, SecondaryDlcSource, merge_secondary_dlc
from steam_app_cache.catalog.search import AppLookup, matches_all_tokens
from steam_app_cache.catalog.synchronizer import (
    CatalogSynchronizer,
    CategorySyncResult,
    SyncReport,
)

__all__ = [
    "AppLookup",
    "CatalogSynchronizer",
    "CategorySyncResult",
    "DlcReconciler",
    "SecondaryDlcSource",
    "SyncReport",
    "matches_all_tokens",
    "merge_secondary_dlc",
]
