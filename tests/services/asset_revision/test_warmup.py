from __future__ import annotations

import pytest

from asset_revision.cache import FingerprintCache
from asset_revision.config import AssetConfig
from asset_revision.contracts import AssetType
from asset_revision.errors import UnknownAssetTypeError
from asset_revision.resolver import BundleResolver, CommitResolver
from asset_revision.vcs import VcsClient
from asset_revision.warmup import WarmupRunner


class RecordingVcs(VcsClient):
    def __init__(self, responses: dict[str, str | None]) -> None:
        self.responses = responses
        self.calls: list[str] = []

    def latest_commit_touching(self, paths):
        key = " ".join(paths)
        self.calls.append(key)
        return self.responses.get(key)


class SpyCatalog:
    def __init__(
        self,
        bundles: dict[AssetType, dict[str, list[str]]],
        *,
        cache_enabled: bool = True,
    ) -> None:
        self.bundles = bundles
        self.cache_enabled = cache_enabled
        self.prewarm_environments = ["production", "staging", "selenium"]
        self.reads = 0

    def is_prewarm(self, environment: str | None) -> bool:
        return environment in self.prewarm_environments

    def assets_dir(self, asset_type: AssetType) -> str:
        self.reads += 1
        return "public"

    def bundle_names(self, asset_type: AssetType) -> list[str]:
        self.reads += 1
        return list(self.bundles.get(asset_type, {}))

    def bundle_filepaths(self, bundle: str, asset_type: AssetType) -> list[str]:
        self.reads += 1
        return list(self.bundles.get(asset_type, {}).get(bundle, []))


def _runner(catalog: SpyCatalog, responses: dict[str, str | None], environment: str):
    cache = FingerprintCache()
    vcs = RecordingVcs(responses)
    commit_resolver = CommitResolver(cache, vcs)
    bundle_resolver = BundleResolver(cache, catalog, commit_resolver)
    return WarmupRunner(catalog, bundle_resolver, commit_resolver, environment), vcs, cache


def _two_bundles() -> dict[AssetType, dict[str, list[str]]]:
    return {
        AssetType.CSS: {"application": ["css/reset.css", "css/layout.css"]},
        AssetType.JS: {"application": ["js/jquery.js", "js/app.js"]},
    }


@pytest.mark.parametrize("environment", ["development", "test", ""])
def test_warmup_is_noop_outside_prewarm_environments(environment: str) -> None:
    catalog = SpyCatalog(_two_bundles())
    runner, vcs, cache = _runner(catalog, {"css/reset.css": "1234567"}, environment)

    summary = runner.warm_all_bundles()

    assert summary.ran is False
    assert vcs.calls == []
    assert catalog.reads == 0
    assert cache.commit_ids == {}


def test_warmup_resolves_bundles_and_each_file() -> None:
    responses = {
        "css/reset.css css/layout.css": "aaaaaaa",
        "css/reset.css": "1111111",
        "css/layout.css": "aaaaaaa",
        "js/jquery.js js/app.js": "bbbbbbb",
        "js/jquery.js": "2222222",
        "js/app.js": "bbbbbbb",
    }
    catalog = SpyCatalog(_two_bundles())
    runner, vcs, cache = _runner(catalog, responses, "production")

    summary = runner.warm_all_bundles()

    assert summary.ran is True
    assert (summary.bundles, summary.bundles_resolved) == (2, 2)
    assert (summary.files, summary.files_resolved) == (4, 4)
    assert sorted(vcs.calls) == sorted(responses)
    assert cache.bundle_commit_ids == {
        AssetType.CSS: {"application": "aaaaaaa"},
        AssetType.JS: {"application": "bbbbbbb"},
    }
    assert cache.commit_id("js/jquery.js") == "2222222"


def test_warmup_tolerates_missing_commits() -> None:
    responses = {"css/reset.css": "1111111", "js/jquery.js js/app.js": "bbbbbbb"}
    catalog = SpyCatalog(_two_bundles())
    runner, vcs, cache = _runner(catalog, responses, "staging")

    summary = runner.warm_all_bundles()

    assert summary.bundles_missing == 1
    assert summary.files_missing == 3
    assert len(vcs.calls) == 6
    assert cache.commit_ids == {"css/reset.css": "1111111", "js/jquery.js js/app.js": "bbbbbbb"}


def test_warmup_skips_bundle_lookup_when_caching_disabled() -> None:
    catalog = SpyCatalog(_two_bundles(), cache_enabled=False)
    runner, vcs, cache = _runner(catalog, {}, "selenium")

    summary = runner.warm_all_bundles()

    assert summary.bundles == 0
    assert summary.files == 4
    assert sorted(vcs.calls) == ["css/layout.css", "css/reset.css", "js/app.js", "js/jquery.js"]
    assert cache.bundle_commit_ids == {AssetType.CSS: {}, AssetType.JS: {}}


def test_warmup_skips_types_without_bundles() -> None:
    catalog = SpyCatalog({AssetType.JS: {"application": ["js/app.js"]}})
    runner, vcs, _ = _runner(catalog, {"js/app.js": "bbbbbbb"}, "production")

    summary = runner.warm_all_bundles()

    assert summary.bundles == 1
    assert summary.files == 1
    assert vcs.calls == ["js/app.js"]


def test_warmup_bundle_and_file_entries_are_separate_keys() -> None:
    catalog = SpyCatalog({AssetType.JS: {"application": ["js/app.js"]}})
    runner, vcs, cache = _runner(catalog, {"js/app.js": "bbbbbbb"}, "production")

    runner.warm_all_bundles()
    runner.warm_all_bundles()

    assert vcs.calls == ["js/app.js"]
    assert cache.bundle_commit_id(AssetType.JS, "application") == "bbbbbbb"
    assert cache.commit_id("js/app.js") == "bbbbbbb"


def test_warmup_propagates_type_errors() -> None:
    class BrokenResolver(BundleResolver):
        def resolve_latest_bundle_commit(self, bundle, asset_type):
            raise UnknownAssetTypeError("broken config")

    catalog = SpyCatalog(_two_bundles())
    cache = FingerprintCache()
    commit_resolver = CommitResolver(cache, RecordingVcs({}))
    runner = WarmupRunner(catalog, BrokenResolver(cache, catalog, commit_resolver), commit_resolver, "production")

    with pytest.raises(UnknownAssetTypeError):
        runner.warm_all_bundles()


def test_warmup_uses_config_prewarm_check() -> None:
    config = AssetConfig.from_payload(
        {"prewarm_environments": ["Production"], "js": {"dir": "js", "bundles": {"application": ["app"]}}}
    )
    cache = FingerprintCache()
    vcs = RecordingVcs({"js/app.js": "bbbbbbb"})
    commit_resolver = CommitResolver(cache, vcs)
    bundle_resolver = BundleResolver(cache, config, commit_resolver)

    skipped = WarmupRunner(config, bundle_resolver, commit_resolver, "staging").warm_all_bundles()
    assert skipped.ran is False
    assert vcs.calls == []

    summary = WarmupRunner(config, bundle_resolver, commit_resolver, " PRODUCTION ").warm_all_bundles()
    assert summary.ran is True
    assert vcs.calls == ["js/app.js"]
