"""Composition root wiring config, cache, VCS client and resolvers."""

from __future__ import annotations

from dataclasses import dataclass
import posixpath
from typing import Any, Sequence

from .cache import FingerprintCache
from .config import AssetConfig, asset_filename
from .contracts import AssetType, VcsKind, parse_asset_type
from .resolver import BundleResolver, CommitResolver
from .runtime import current_environment
from .vcs import GitVcsClient, VcsClient
from .warmup import WarmupRunner, WarmupSummary

BUNDLES_DIRNAME = "bundles"


@dataclass
class AssetRevisionService:
    config: AssetConfig
    environment: str
    cache: FingerprintCache
    vcs_client: VcsClient
    commit_resolver: CommitResolver
    bundle_resolver: BundleResolver
    warmup_runner: WarmupRunner

    @classmethod
    def build(
        cls,
        config: AssetConfig,
        *,
        environment: str | None = None,
        vcs_client: VcsClient | None = None,
        cache: FingerprintCache | None = None,
    ) -> "AssetRevisionService":
        env_name = current_environment(environment, config.environment)
        cache = cache or FingerprintCache()
        vcs_client = vcs_client or GitVcsClient(
            repo_root=config.repo_root,
            timeout_seconds=config.vcs_timeout_seconds,
        )
        commit_resolver = CommitResolver(cache, vcs_client)
        bundle_resolver = BundleResolver(cache, config, commit_resolver)
        warmup_runner = WarmupRunner(config, bundle_resolver, commit_resolver, env_name)
        return cls(
            config=config,
            environment=env_name,
            cache=cache,
            vcs_client=vcs_client,
            commit_resolver=commit_resolver,
            bundle_resolver=bundle_resolver,
            warmup_runner=warmup_runner,
        )

    def last_commit_id(self, paths: Sequence[str] | str, vcs: VcsKind | str = VcsKind.GIT) -> str | None:
        return self.commit_resolver.resolve_latest_commit(paths, vcs=vcs)

    def last_bundle_commit_id(self, bundle: str, asset_type: AssetType | str) -> str | None:
        return self.bundle_resolver.resolve_latest_bundle_commit(bundle, asset_type)

    def warm(self) -> WarmupSummary:
        return self.warmup_runner.warm_all_bundles()

    def asset_url(self, name: str, asset_type: AssetType | str) -> str:
        asset_type = parse_asset_type(asset_type)
        filename = asset_filename(name, asset_type)
        filepath = posixpath.join(self.config.assets_dir(asset_type), filename)
        commit_id = self.commit_resolver.resolve_latest_commit([filepath])
        return fingerprint_url(self._url(asset_type, filename), commit_id)

    def bundle_url(self, bundle: str, asset_type: AssetType | str) -> str:
        asset_type = parse_asset_type(asset_type)
        filename = f"{BUNDLES_DIRNAME}/{bundle}.min.{asset_type.value}"
        commit_id = self.bundle_resolver.resolve_latest_bundle_commit(bundle, asset_type)
        return fingerprint_url(self._url(asset_type, filename), commit_id)

    def snapshot(self) -> dict[str, Any]:
        payload = self.cache.snapshot()
        payload["environment"] = self.environment
        return payload

    def _url(self, asset_type: AssetType, filename: str) -> str:
        host = (self.config.asset_host or "").rstrip("/")
        return f"{host}{self.config.url_root(asset_type)}/{filename}"


def fingerprint_url(url: str, commit_id: str | None) -> str:
    if not commit_id:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{commit_id}"
