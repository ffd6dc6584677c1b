"""Process-lifetime memo of resolved commit ids."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Hashable

from .contracts import ASSET_TYPES, AssetType

logger = logging.getLogger(__name__)

LOCK_STRIPES = 64


class FingerprintCache:
    """Write-once memo for file-set and bundle commit ids.

    Only present values are stored; a None result leaves the key empty so the
    next lookup queries the VCS again. Stored entries are never replaced.
    Computation for a key runs under a lock picked by key hash from a fixed
    pool. File-set and bundle keys use separate pools; a bundle computation
    may take a file-set lock while holding its bundle lock, never the reverse.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._file_set_locks = tuple(threading.Lock() for _ in range(LOCK_STRIPES))
        self._bundle_locks = tuple(threading.Lock() for _ in range(LOCK_STRIPES))
        self._commit_ids: dict[str, str] = {}
        self._bundle_commit_ids: dict[AssetType, dict[str, str]] | None = None

    @property
    def commit_ids(self) -> dict[str, str]:
        with self._lock:
            return dict(self._commit_ids)

    @property
    def bundle_commit_ids(self) -> dict[AssetType, dict[str, str]]:
        with self._lock:
            bundles = self._bundles_locked()
            return {asset_type: dict(entries) for asset_type, entries in bundles.items()}

    def commit_id(self, key: str) -> str | None:
        with self._lock:
            return self._commit_ids.get(key)

    def bundle_commit_id(self, asset_type: AssetType, bundle: str) -> str | None:
        with self._lock:
            return self._bundles_locked()[asset_type].get(bundle)

    def store_commit_id(self, key: str, commit_id: str | None) -> str | None:
        if not commit_id:
            return None
        with self._lock:
            return self._commit_ids.setdefault(key, commit_id)

    def store_bundle_commit_id(self, asset_type: AssetType, bundle: str, commit_id: str | None) -> str | None:
        if not commit_id:
            return None
        with self._lock:
            return self._bundles_locked()[asset_type].setdefault(bundle, commit_id)

    def memoize_commit(self, key: str, compute: Callable[[], str | None]) -> str | None:
        cached = self.commit_id(key)
        if cached:
            logger.debug("commit cache hit key=%s", key)
            return cached
        with _stripe(self._file_set_locks, key):
            cached = self.commit_id(key)
            if cached:
                return cached
            logger.debug("commit cache miss key=%s", key)
            return self.store_commit_id(key, compute())

    def memoize_bundle_commit(
        self,
        asset_type: AssetType,
        bundle: str,
        compute: Callable[[], str | None],
    ) -> str | None:
        cached = self.bundle_commit_id(asset_type, bundle)
        if cached:
            logger.debug("bundle cache hit type=%s bundle=%s", asset_type.value, bundle)
            return cached
        with _stripe(self._bundle_locks, (asset_type, bundle)):
            cached = self.bundle_commit_id(asset_type, bundle)
            if cached:
                return cached
            logger.debug("bundle cache miss type=%s bundle=%s", asset_type.value, bundle)
            return self.store_bundle_commit_id(asset_type, bundle, compute())

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            bundles = self._bundles_locked()
            return {
                "commit_ids": dict(sorted(self._commit_ids.items())),
                "bundle_commit_ids": {
                    asset_type.value: dict(sorted(entries.items())) for asset_type, entries in bundles.items()
                },
            }

    def clear(self) -> None:
        with self._lock:
            self._commit_ids.clear()
            self._bundle_commit_ids = None

    def _bundles_locked(self) -> dict[AssetType, dict[str, str]]:
        if self._bundle_commit_ids is None:
            self._bundle_commit_ids = {asset_type: {} for asset_type in ASSET_TYPES}
        return self._bundle_commit_ids


def _stripe(locks: tuple[threading.Lock, ...], key: Hashable) -> threading.Lock:
    return locks[hash(key) % len(locks)]
