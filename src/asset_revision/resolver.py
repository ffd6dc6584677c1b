"""Commit id resolution for file sets and configured bundles."""

from __future__ import annotations

import logging
from typing import Sequence

from .cache import FingerprintCache
from .config import BundleCatalog
from .contracts import AssetType, VcsKind, parse_asset_type, parse_vcs_kind
from .vcs import VcsClient

logger = logging.getLogger(__name__)


def file_set_key(paths: Sequence[str]) -> str:
    return " ".join(paths)


class CommitResolver:
    """Latest commit id for any of a set of files, memoized on success."""

    def __init__(self, cache: FingerprintCache, vcs_client: VcsClient) -> None:
        self.cache = cache
        self.vcs_client = vcs_client

    def resolve_latest_commit(
        self,
        paths: Sequence[str] | str,
        vcs: VcsKind | str = VcsKind.GIT,
    ) -> str | None:
        parse_vcs_kind(vcs)
        if isinstance(paths, str):
            paths = [paths]
        file_set = [str(path) for path in paths]
        if not file_set:
            return None
        return self.cache.memoize_commit(
            file_set_key(file_set),
            lambda: self.vcs_client.latest_commit_touching(file_set),
        )


class BundleResolver:
    """Latest commit id across the files of a configured bundle."""

    def __init__(
        self,
        cache: FingerprintCache,
        catalog: BundleCatalog,
        commit_resolver: CommitResolver,
    ) -> None:
        self.cache = cache
        self.catalog = catalog
        self.commit_resolver = commit_resolver

    def resolve_latest_bundle_commit(self, bundle: str, asset_type: AssetType | str) -> str | None:
        asset_type = parse_asset_type(asset_type)

        def compute() -> str | None:
            directory = self.catalog.assets_dir(asset_type)
            filepaths = self.catalog.bundle_filepaths(bundle, asset_type)
            if not filepaths:
                logger.debug("bundle has no files type=%s bundle=%s dir=%s", asset_type.value, bundle, directory)
                return None
            return self.commit_resolver.resolve_latest_commit(filepaths)

        return self.cache.memoize_bundle_commit(asset_type, bundle, compute)
