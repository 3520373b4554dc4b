"""Public store exports for syncdrive."""

from __future__ import annotations

from .codec import StorageRecord, decode_record, encode_item
from .kv import KvSession, OrderedKvFile
from .metadata_store import LocalSyncStore, MetadataStore, RemoteSyncStore
from .paths import children_scan_bounds, is_immediate_child, normalize_path

__all__ = [
    "MetadataStore",
    "RemoteSyncStore",
    "LocalSyncStore",
    "OrderedKvFile",
    "KvSession",
    "StorageRecord",
    "encode_item",
    "decode_record",
    "normalize_path",
    "children_scan_bounds",
    "is_immediate_child",
]
