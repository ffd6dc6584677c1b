"""Asset bundle configuration loader."""

from __future__ import annotations

import os
import posixpath
import re
from pathlib import Path
from typing import Any, Protocol

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from .contracts import AssetType, parse_asset_type
from .errors import AssetConfigError, UnknownAssetTypeError

_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

DEFAULT_PREWARM_ENVIRONMENTS: tuple[str, ...] = ("production", "staging", "selenium")

DEFAULT_ASSET_DIRS: dict[AssetType, str] = {
    AssetType.CSS: "public/stylesheets",
    AssetType.JS: "public/javascripts",
}

DEFAULT_URL_ROOTS: dict[AssetType, str] = {
    AssetType.CSS: "/stylesheets",
    AssetType.JS: "/javascripts",
}


class BundleCatalog(Protocol):
    """Read side of the bundle configuration used by the resolvers."""

    cache_enabled: bool

    def is_prewarm(self, environment: str | None) -> bool:
        ...

    def assets_dir(self, asset_type: AssetType) -> str:
        ...

    def bundle_names(self, asset_type: AssetType) -> list[str]:
        ...

    def bundle_filepaths(self, bundle: str, asset_type: AssetType) -> list[str]:
        ...


class BundleSection(BaseModel):
    dir: str | None = None
    url_root: str | None = None
    bundles: dict[str, list[str]] = {}

    @field_validator("bundles", mode="before")
    @classmethod
    def _bundles(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(name): _file_list(files) for name, files in value.items()}
        return value


class AssetConfig(BaseModel):
    environment: str | None = None
    prewarm_environments: list[str] = list(DEFAULT_PREWARM_ENVIRONMENTS)
    cache_enabled: bool = True
    repo_root: str = "."
    vcs_timeout_seconds: float | None = None
    asset_host: str = ""
    sections: dict[AssetType, BundleSection] = {}

    @field_validator("prewarm_environments")
    @classmethod
    def _normalize_environments(cls, value: list[str]) -> list[str]:
        return [item.strip().lower() for item in value if item and item.strip()]

    @field_validator("vcs_timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("vcs_timeout_seconds must be positive")
        return value

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AssetConfig":
        if not isinstance(payload, dict):
            raise AssetConfigError("asset config must be a mapping")
        settings: dict[str, Any] = {}
        sections: dict[AssetType, Any] = {}
        for key, value in payload.items():
            if key in cls.model_fields and key != "sections":
                settings[key] = value
                continue
            try:
                asset_type = parse_asset_type(key)
            except UnknownAssetTypeError as exc:
                raise AssetConfigError(f"unknown config section '{key}': {exc.detail}") from exc
            if asset_type in sections:
                raise AssetConfigError(f"duplicate config section for type '{asset_type.value}'")
            sections[asset_type] = value or {}
        try:
            return cls(sections=sections, **settings)
        except ValidationError as exc:
            raise AssetConfigError(str(exc)) from exc

    def section(self, asset_type: AssetType | str) -> BundleSection | None:
        return self.sections.get(parse_asset_type(asset_type))

    def assets_dir(self, asset_type: AssetType | str) -> str:
        asset_type = parse_asset_type(asset_type)
        section = self.sections.get(asset_type)
        if section and section.dir:
            return section.dir.rstrip("/")
        return DEFAULT_ASSET_DIRS[asset_type]

    def url_root(self, asset_type: AssetType | str) -> str:
        asset_type = parse_asset_type(asset_type)
        section = self.sections.get(asset_type)
        if section and section.url_root:
            return section.url_root.rstrip("/")
        return DEFAULT_URL_ROOTS[asset_type]

    def bundle_names(self, asset_type: AssetType | str) -> list[str]:
        section = self.section(asset_type)
        if section is None:
            return []
        return list(section.bundles)

    def bundle_filepaths(self, bundle: str, asset_type: AssetType | str) -> list[str]:
        asset_type = parse_asset_type(asset_type)
        section = self.sections.get(asset_type)
        if section is None:
            return []
        directory = self.assets_dir(asset_type)
        return [
            posixpath.join(directory, asset_filename(name, asset_type))
            for name in section.bundles.get(bundle, [])
        ]

    def is_prewarm(self, environment: str | None) -> bool:
        return (environment or "").strip().lower() in self.prewarm_environments


def asset_filename(name: str, asset_type: AssetType) -> str:
    suffix = f".{asset_type.value}"
    return name if name.endswith(suffix) else f"{name}{suffix}"


def _file_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


def _expand_str(value: str) -> str:
    def replacer(match: re.Match[str]) -> str:
        token = match.group(1)
        if ":-" in token:
            key, default = token.split(":-", 1)
            actual = os.getenv(key, "")
            return actual if actual.strip() else default
        actual = os.getenv(token, "")
        if not actual.strip():
            raise AssetConfigError(f"missing environment variable: {token}")
        return actual

    return _VAR_PATTERN.sub(replacer, value)


def _expand_payload(value: Any) -> Any:
    if isinstance(value, str):
        return _expand_str(value)
    if isinstance(value, list):
        return [_expand_payload(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _expand_payload(item) for key, item in value.items()}
    return value


def load_asset_config(path: Path) -> AssetConfig:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        data = {}
    return AssetConfig.from_payload(_expand_payload(data))
