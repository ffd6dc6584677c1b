"""Startup warmup of bundle and per-file commit ids."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

from .config import BundleCatalog
from .contracts import ASSET_TYPES
from .resolver import BundleResolver, CommitResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WarmupSummary:
    environment: str
    ran: bool
    bundles: int = 0
    bundles_resolved: int = 0
    files: int = 0
    files_resolved: int = 0

    @property
    def bundles_missing(self) -> int:
        return self.bundles - self.bundles_resolved

    @property
    def files_missing(self) -> int:
        return self.files - self.files_resolved

    def as_dict(self) -> dict[str, Any]:
        return {
            "environment": self.environment,
            "ran": self.ran,
            "bundles": self.bundles,
            "bundles_resolved": self.bundles_resolved,
            "files": self.files,
            "files_resolved": self.files_resolved,
        }


class WarmupRunner:
    """Precomputes commit ids for every configured bundle.

    Web processes should run this once at boot so the first requests do not
    pay for VCS lookups. Only runs in pre-warm environments.
    """

    def __init__(
        self,
        catalog: BundleCatalog,
        bundle_resolver: BundleResolver,
        commit_resolver: CommitResolver,
        environment: str,
    ) -> None:
        self.catalog = catalog
        self.bundle_resolver = bundle_resolver
        self.commit_resolver = commit_resolver
        self.environment = environment

    def should_run(self) -> bool:
        return self.catalog.is_prewarm(self.environment)

    def warm_all_bundles(self) -> WarmupSummary:
        if not self.should_run():
            logger.debug("warmup skipped environment=%s", self.environment)
            return WarmupSummary(environment=self.environment, ran=False)

        bundles = bundles_resolved = files = files_resolved = 0
        for asset_type in ASSET_TYPES:
            names = self.catalog.bundle_names(asset_type)
            if not names:
                continue
            for bundle in names:
                if self.catalog.cache_enabled:
                    bundles += 1
                    if self.bundle_resolver.resolve_latest_bundle_commit(bundle, asset_type):
                        bundles_resolved += 1
                for filepath in self.catalog.bundle_filepaths(bundle, asset_type):
                    files += 1
                    if self.commit_resolver.resolve_latest_commit([filepath]):
                        files_resolved += 1

        summary = WarmupSummary(
            environment=self.environment,
            ran=True,
            bundles=bundles,
            bundles_resolved=bundles_resolved,
            files=files,
            files_resolved=files_resolved,
        )
        logger.info(
            "warmup complete environment=%s bundles=%s/%s files=%s/%s",
            self.environment,
            bundles_resolved,
            bundles,
            files_resolved,
            files,
        )
        return summary
