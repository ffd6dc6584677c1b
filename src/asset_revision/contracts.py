"""Asset type and VCS kind vocabularies."""

from __future__ import annotations

from enum import Enum

from .errors import UnknownAssetTypeError, UnsupportedVcsError


class AssetType(str, Enum):
    CSS = "css"
    JS = "js"


class VcsKind(str, Enum):
    GIT = "git"


_ALIASES: dict[str, AssetType] = {
    "css": AssetType.CSS,
    "stylesheet": AssetType.CSS,
    "stylesheets": AssetType.CSS,
    "js": AssetType.JS,
    "script": AssetType.JS,
    "scripts": AssetType.JS,
    "javascript": AssetType.JS,
    "javascripts": AssetType.JS,
}

ASSET_TYPES: tuple[AssetType, ...] = (AssetType.CSS, AssetType.JS)
SUPPORTED_VCS: frozenset[VcsKind] = frozenset({VcsKind.GIT})


def parse_asset_type(value: AssetType | str) -> AssetType:
    if isinstance(value, AssetType):
        return value
    key = str(value or "").strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    known = ", ".join(item.value for item in ASSET_TYPES)
    raise UnknownAssetTypeError(f'unknown type "{value}"; should be one of: {known}')


def parse_vcs_kind(value: VcsKind | str) -> VcsKind:
    if isinstance(value, VcsKind):
        kind = value
    else:
        try:
            kind = VcsKind(str(value or "").strip().lower())
        except ValueError:
            raise UnsupportedVcsError(f"{value}; git is currently the only supported VCS") from None
    if kind not in SUPPORTED_VCS:
        raise UnsupportedVcsError(f"{kind.value}; git is currently the only supported VCS")
    return kind
