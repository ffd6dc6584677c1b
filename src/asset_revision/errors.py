"""Asset revision error taxonomy and helpers."""

from __future__ import annotations


class AssetRevisionError(RuntimeError):
    """Stable error surfaced to callers as a reason code."""

    code = "ASSET_REVISION_ERROR"

    def __init__(self, detail: str | None = None, *, code: str | None = None) -> None:
        if code:
            self.code = code
        self.detail = detail
        message = f"{self.code}:{detail}" if detail else self.code
        super().__init__(message)


class UnsupportedVcsError(AssetRevisionError):
    code = "UNSUPPORTED_VCS"


class UnknownAssetTypeError(AssetRevisionError):
    code = "UNKNOWN_ASSET_TYPE"


class AssetConfigError(ValueError):
    """Raised when the asset configuration file is invalid."""


def reason_code(exc: AssetRevisionError | AssetConfigError) -> str:
    if isinstance(exc, AssetRevisionError):
        return exc.code
    return "ASSET_CONFIG_INVALID"
