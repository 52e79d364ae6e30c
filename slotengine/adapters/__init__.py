"""
Adapters layer - Booking store integrations (REST store and local snapshots).
"""

from .rest_client import RestStoreClient
from .snapshot_store import SnapshotStore

__all__ = ["RestStoreClient", "SnapshotStore"]
