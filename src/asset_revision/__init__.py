"""Commit-id fingerprints for static asset bundles."""

from .cache import FingerprintCache
from .config import AssetConfig, load_asset_config
from .contracts import AssetType, VcsKind
from .errors import AssetConfigError, AssetRevisionError, UnknownAssetTypeError, UnsupportedVcsError
from .resolver import BundleResolver, CommitResolver
from .service import AssetRevisionService, fingerprint_url
from .vcs import GitVcsClient, VcsClient
from .warmup import WarmupRunner, WarmupSummary

__all__ = [
    "AssetConfig",
    "AssetConfigError",
    "AssetRevisionError",
    "AssetRevisionService",
    "AssetType",
    "BundleResolver",
    "CommitResolver",
    "FingerprintCache",
    "GitVcsClient",
    "UnknownAssetTypeError",
    "UnsupportedVcsError",
    "VcsClient",
    "VcsKind",
    "WarmupRunner",
    "WarmupSummary",
    "fingerprint_url",
    "load_asset_config",
]
