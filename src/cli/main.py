"""Logbook CLI entry points.

This module exposes import, export, and duplicate maintenance commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
import json
from pathlib import Path
from typing import Any, Sequence

from core.config import LogbookConfig
from core.types import ImportOutcome, ImportPolicy, LotwCredentials
from store.adif_export import write_adif_export
from store.logbook_sdk import LogbookClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="logbook", description="Contact logbook CLI")
    parser.add_argument("--data-root", help="Override LOGBOOK_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_import_command(subparsers)
    _add_import_lotw_command(subparsers)
    _add_export_command(subparsers)
    _add_merge_duplicates_command(subparsers)
    _add_duplicates_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the logbook CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _build_config(args.data_root)
    client = LogbookClient(config)
    if args.command == "import":
        return _run_import_command(client, args)
    if args.command == "import-lotw":
        return _run_import_lotw_command(client, config, parser, args)
    if args.command == "export":
        return _run_export_command(client, args)
    if args.command == "merge-duplicates":
        return _run_merge_duplicates_command(client)
    if args.command == "duplicates":
        print(client.count_duplicates())
        return 0
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(data_root: str | None) -> LogbookConfig:
    """Build config with optional data-root override."""
    config = LogbookConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return config


def _run_import_command(client: LogbookClient, args: argparse.Namespace) -> int:
    """Handle import command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    outcome = client.import_file(args.source, _policy_from_args(args))
    return _print_outcome(outcome)


def _run_import_lotw_command(
    client: LogbookClient,
    config: LogbookConfig,
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
) -> int:
    """Handle import-lotw command.

    The password comes from ``--password`` or ``LOGBOOK_LOTW_PASSWORD``.
    """
    password = args.password or config.lotw_password
    if not password:
        parser.error("import-lotw requires --password or LOGBOOK_LOTW_PASSWORD")
    credentials = LotwCredentials(
        username=args.username,
        password=password,
        start_date=args.start_date,
        end_date=args.end_date,
    )
    outcome = client.import_lotw(credentials, _policy_from_args(args))
    return _print_outcome(outcome)


def _run_export_command(client: LogbookClient, args: argparse.Namespace) -> int:
    """Handle export command."""
    document = client.export_adif(args.start_date, args.end_date)
    if args.output:
        write_adif_export(Path(args.output).expanduser(), document)
        print(args.output)
        return 0
    print(document, end="")
    return 0


def _run_merge_duplicates_command(client: LogbookClient) -> int:
    """Handle merge-duplicates command."""
    result = client.collapse_duplicates()
    payload = {
        "success": not result.errors,
        "merged_count": result.removed_count,
        "group_count": result.group_count,
        "errors": list(result.errors),
        "message": f"Successfully merged {result.removed_count} duplicate records",
    }
    print(json.dumps(payload, indent=2))
    return 0 if not result.errors else 1


def _policy_from_args(args: argparse.Namespace) -> ImportPolicy:
    return ImportPolicy(
        merge_duplicates=args.merge_duplicates,
        update_existing=args.update_existing,
    )


def _print_outcome(outcome: ImportOutcome) -> int:
    print(json.dumps(outcome.to_payload(), indent=2))
    return 0 if outcome.success else 1


def _add_policy_arguments(parser: argparse.ArgumentParser) -> None:
    """Register merge policy flags shared by import commands."""
    parser.add_argument(
        "--merge-duplicates",
        action="store_true",
        help="Skip records matching an existing contact",
    )
    parser.add_argument(
        "--update-existing",
        action="store_true",
        help="Update matching contacts from imported records",
    )


def _add_import_command(subparsers: Any) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser("import", help="Import an ADIF file")
    parser.add_argument("source", help="ADIF file path or s3://bucket/key")
    _add_policy_arguments(parser)


def _add_import_lotw_command(subparsers: Any) -> None:
    """Register import-lotw subcommand."""
    parser = subparsers.add_parser("import-lotw", help="Import confirmed contacts from LoTW")
    parser.add_argument("--username", required=True, help="LoTW username")
    parser.add_argument("--password", help="LoTW password (or LOGBOOK_LOTW_PASSWORD)")
    parser.add_argument("--start-date", help="Inclusive YYYY-MM-DD start date")
    parser.add_argument("--end-date", help="Inclusive YYYY-MM-DD end date")
    _add_policy_arguments(parser)


def _add_export_command(subparsers: Any) -> None:
    """Register export subcommand."""
    parser = subparsers.add_parser("export", help="Export contacts as ADIF")
    parser.add_argument("--output", help="Output file; stdout when omitted")
    parser.add_argument("--start-date", help="Inclusive YYYY-MM-DD start date")
    parser.add_argument("--end-date", help="Inclusive YYYY-MM-DD end date")


def _add_merge_duplicates_command(subparsers: Any) -> None:
    """Register merge-duplicates subcommand."""
    subparsers.add_parser("merge-duplicates", help="Collapse duplicate contacts")


def _add_duplicates_command(subparsers: Any) -> None:
    """Register duplicates subcommand."""
    subparsers.add_parser("duplicates", help="Count contacts a merge would remove")
