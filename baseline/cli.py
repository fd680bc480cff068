"""Command-line entry point for baseline operations.

Subcommands:
  resolve-version   Print the baseline version for a build mode
  fetch             Copy the baseline app for an extension into a symbols dir
  update-manifest   Create or patch AppSourceCop.json
  restore           All of the above for an extension folder

Exit code 0 on success, 1 on any baseline error, 2 on usage errors.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from baseline.config import DEFAULT_PUBLISHER, load_build_settings
from baseline.errors import BaselineError
from baseline.fetcher import fetch_baseline
from baseline.manifest import update_manifest
from baseline.resolver import resolve_baseline_version
from baseline.schemas import BuildMode
from baseline.sources import PackageFeed, source_for_mode
from baseline.workflow import restore_baseline

logger = logging.getLogger(__name__)


def _build_mode(value: str) -> BuildMode:
    try:
        return BuildMode.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _add_mode(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode",
        type=_build_mode,
        default=BuildMode.DEFAULT,
        help="Build mode: Clean (latest published) or Default (pinned). Default: Default",
    )


def _add_repo_root(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--repo-root",
        type=Path,
        default=Path.cwd(),
        help="Repository root holding build/BuildConfig.json (default: current directory)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="baseline",
        description="Restore breaking-change baselines for app packages",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    resolve = sub.add_parser("resolve-version", help="Print the baseline version")
    _add_mode(resolve)
    _add_repo_root(resolve)

    fetch = sub.add_parser("fetch", help="Copy a baseline app into a symbols directory")
    _add_mode(fetch)
    fetch.add_argument("--extension", required=True, help="Extension name")
    fetch.add_argument("--version", required=True, help="Baseline version")
    fetch.add_argument("--symbols-dir", type=Path, required=True, help="Target symbols directory")

    manifest = sub.add_parser("update-manifest", help="Create or patch AppSourceCop.json")
    manifest.add_argument("--folder", type=Path, required=True, help="Extension folder")
    manifest.add_argument("--extension", required=True, help="Extension name")
    manifest.add_argument("--version", required=True, help="Baseline version")
    manifest.add_argument(
        "--publisher",
        default=DEFAULT_PUBLISHER,
        help=f"Extension publisher (default: {DEFAULT_PUBLISHER})",
    )
    manifest.add_argument("--repo-version", required=True, help="Current build version, e.g. 26.0")
    manifest.add_argument(
        "--max-obsolete-major",
        type=int,
        required=True,
        help="Highest major version for which obsolete tags are allowed",
    )

    restore = sub.add_parser("restore", help="Resolve, fetch and patch in one step")
    _add_mode(restore)
    _add_repo_root(restore)
    restore.add_argument(
        "--extension-folder", type=Path, required=True, help="Folder containing app.json"
    )
    restore.add_argument("--symbols-dir", type=Path, required=True, help="Target symbols directory")

    return parser


def _run(args: argparse.Namespace) -> str:
    if args.command == "resolve-version":
        settings = load_build_settings(args.repo_root)
        return resolve_baseline_version(args.mode, PackageFeed(), settings)

    if args.command == "fetch":
        path = fetch_baseline(
            source_for_mode(args.mode), args.extension, args.version, args.symbols_dir
        )
        return str(path)

    if args.command == "update-manifest":
        path = update_manifest(
            args.folder,
            args.extension,
            args.version,
            args.publisher,
            args.repo_version,
            args.max_obsolete_major,
        )
        return str(path)

    settings = load_build_settings(args.repo_root)
    result = restore_baseline(args.mode, args.extension_folder, args.symbols_dir, settings)
    return f"{result.baseline_version} {result.artifact_path} {result.manifest_path}"


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        output = _run(args)
    except BaselineError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"{exc.code}: {exc.message}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
