from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from repoconfig.foundation.config_io import REPO_CONFIG_FILENAME, find_repo_root
from repoconfig.foundation.logging_utils import configure_logger
from repoconfig.framework.errors import RepoConfigError
from repoconfig.framework.reader import Reader
from repoconfig.steps.registry import get_step_registry


def _print_err(message: str) -> None:
    sys.stderr.write(message.rstrip() + "\n")


def _add_repo_dir(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--repo-dir",
        type=str,
        default=None,
        help=f"Repository checkout (defaults to the nearest ancestor holding {REPO_CONFIG_FILENAME} or .git).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="repoconfig", add_help=True)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help=f"Load and validate {REPO_CONFIG_FILENAME}")
    _add_repo_dir(validate)

    sub.add_parser("list-steps", help="List registered step types")

    for stage_name in ("plan", "apply"):
        stage = sub.add_parser(stage_name, help=f"Print the resolved {stage_name} steps as JSON")
        _add_repo_dir(stage)
        stage.add_argument("--dir", required=True, help="Project path relative to the repo root")
        stage.add_argument("--workspace", default="default", help="Workspace name (default: default)")
        stage.add_argument("--user", default="", help="Acting username")
        stage.add_argument("--tf-version", default=None, help="Resolved terraform version")
        stage.add_argument(
            "--strict-steps",
            action="store_true",
            help="Fail on configured step types that have no implementation instead of skipping them",
        )
        stage.add_argument(
            "comment_args",
            nargs="*",
            help="Extra arguments from the triggering comment (pass after --)",
        )

    return parser


def _resolve_repo_dir(raw: str | None) -> str:
    return raw if raw else find_repo_root()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    log = configure_logger(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "list-steps":
        for row in get_step_registry().describe():
            print(f"{row['step_type']}\t{row['doc'] or ''}")
        return 0

    try:
        repo_dir = _resolve_repo_dir(args.repo_dir)
    except FileNotFoundError as exc:
        _print_err(str(exc))
        return 1

    if args.command == "validate":
        try:
            config = Reader().read_config(repo_dir)
        except RepoConfigError as exc:
            _print_err(f"error: {exc}")
            return 1
        if config is None:
            print(f"no {REPO_CONFIG_FILENAME} found")
            return 0
        print(f"ok: {len(config.projects)} project(s), {len(config.workflows)} workflow(s)")
        return 0

    if args.command in ("plan", "apply"):
        reader = Reader(
            default_tf_version=args.tf_version,
            unknown_step_policy="error" if args.strict_steps else "skip",
        )
        build = reader.build_plan_stage if args.command == "plan" else reader.build_apply_stage
        try:
            stage = build(log, repo_dir, args.workspace, args.dir, args.comment_args, args.user)
        except RepoConfigError as exc:
            _print_err(f"error: {exc}")
            return 1
        print(json.dumps(stage.describe(), indent=2))
        return 0

    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
