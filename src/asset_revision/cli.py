"""Asset revision CLI (bundle/file commit ids and warmup)."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import load_asset_config
from .errors import AssetConfigError, AssetRevisionError, reason_code
from .logging_utils import configure_logging
from .service import AssetRevisionService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Asset revision CLI")
    parser.add_argument("--config", required=True, help="Path to asset bundle config YAML")
    parser.add_argument("--environment", help="Deployment environment (defaults to ASSET_ENV/APP_ENV)")
    action = parser.add_mutually_exclusive_group()
    action.add_argument("--bundle", help="Bundle name to resolve")
    parser.add_argument("--type", dest="asset_type", help="Asset type for --bundle (css or js)")
    action.add_argument("--files", nargs="+", help="Resolve the latest commit touching any of these files")
    action.add_argument("--warm", action="store_true", help="Warm bundle and file commit ids")
    parser.add_argument("--snapshot", action="store_true", help="Print the cache contents after resolving")
    parser.add_argument("--log-level", help="Logging level (defaults to ASSET_REVISION_LOG_LEVEL or INFO)")
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        config = load_asset_config(Path(args.config))
        service = AssetRevisionService.build(config, environment=args.environment)
        output: dict[str, object] = {}
        if args.warm:
            output["warmup"] = service.warm().as_dict()
        elif args.bundle:
            if not args.asset_type:
                parser.error("--bundle requires --type")
            output["commit_id"] = service.last_bundle_commit_id(args.bundle, args.asset_type)
        elif args.files:
            output["commit_id"] = service.last_commit_id(args.files)
        elif not args.snapshot:
            parser.error("Provide --bundle/--type, --files, --warm or --snapshot")
        if args.snapshot:
            output["cache"] = service.snapshot()
    except (AssetRevisionError, AssetConfigError) as exc:
        logger.error("asset revision failed: %s", exc)
        print(reason_code(exc), file=sys.stderr)
        return 2

    print(json.dumps(output, sort_keys=True, ensure_ascii=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
