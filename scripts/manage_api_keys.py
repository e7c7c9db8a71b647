#!/usr/bin/env python3
"""
CLI for API Key Management.

Provides commands to generate, add, list and revoke the API keys accepted
by the host. Keys live in the local state directory shared with the host.
"""

import argparse
import secrets
import sys
from typing import Optional

from src.exceptions import AggregatorHostError
from src.models.api_key import ApiKeyRecord
from src.repositories.api_key_repository import ApiKeyRepository
from src.storage.local_app_data import default_local_app_data


def generate_api_key() -> str:
    """
    Generate a secure random 64-character API key.

    Returns:
        64-character URL-safe API key
    """
    return secrets.token_urlsafe(48)[:64]


def mask_key(key_value: str) -> str:
    """Show only the first four characters of a key."""
    if len(key_value) <= 8:
        return "*" * len(key_value)
    return key_value[:4] + "*" * 8


def _print_created(record: ApiKeyRecord, show_key: bool) -> None:
    print("✓ API Key created successfully")
    print(f"\nKey ID: {record.key_id}")
    if show_key:
        print(f"API Key: {record.key_value}")
        print("\n⚠️  IMPORTANT: Save this API key now!")
        print("   It will not be shown again.")
    print(f"\nLabel: {record.label or 'None'}")


def cmd_generate(label: Optional[str]) -> ApiKeyRecord:
    """
    Generate a new random API key and store it.

    Args:
        label: Human-readable label for the key
    """
    repo = ApiKeyRepository.load()
    record = repo.add(generate_api_key(), label=label)
    _print_created(record, show_key=True)
    return record


def cmd_add(key_value: str, label: Optional[str]) -> ApiKeyRecord:
    """
    Store a caller-supplied API key.

    Args:
        key_value: The key to accept
        label: Human-readable label for the key
    """
    repo = ApiKeyRepository.load()
    record = repo.add(key_value, label=label)
    _print_created(record, show_key=False)
    return record


def cmd_list() -> None:
    """List all API keys with their metadata."""
    repo = ApiKeyRepository.load()
    records = repo.list_keys()

    if not records:
        print("No API keys found.")
        return

    print(f"\n{'Key ID':<38} {'Key':<14} {'Created':<34} {'Label':<30}")
    print("-" * 116)

    for record in records:
        label = record.label or ""
        if len(label) > 27:
            label = label[:27] + "..."
        print(
            f"{record.key_id:<38} {mask_key(record.key_value):<14}"
            f" {record.created_at:<34} {label:<30}"
        )

    print(f"\nTotal: {len(records)} API keys")


def cmd_revoke(key_value: Optional[str] = None, key_id: Optional[str] = None) -> None:
    """
    Revoke an API key given either its value or its key ID.

    Args:
        key_value: The key to revoke
        key_id: The key ID to revoke
    """
    repo = ApiKeyRepository.load()

    if key_id is not None:
        record = repo.find_by_id(key_id)
        if record is None:
            print(f"✗ Error: API key {key_id} not found")
            sys.exit(1)
        key_value = record.key_value

    record = repo.revoke(key_value)
    print(f"✓ API key {record.key_id} has been revoked")


def cmd_path() -> None:
    """Print the local state directory."""
    print(default_local_app_data().get_directory())


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        description="Manage API keys for the Aggregator host",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    generate_parser = subparsers.add_parser(
        "generate", help="Generate and store a new random API key"
    )
    generate_parser.add_argument(
        "--label", type=str, help="Human-readable label for the key"
    )

    add_parser = subparsers.add_parser("add", help="Store an existing API key")
    add_parser.add_argument("key", type=str, help="API key value")
    add_parser.add_argument(
        "--label", type=str, help="Human-readable label for the key"
    )

    subparsers.add_parser("list", help="List all API keys")

    revoke_parser = subparsers.add_parser("revoke", help="Revoke an API key")
    target = revoke_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("key", type=str, nargs="?", help="API key value to revoke")
    target.add_argument("--id", dest="key_id", type=str, help="Key ID to revoke")

    subparsers.add_parser("path", help="Show the local state directory")

    return parser


def main(argv: Optional[list] = None) -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "generate":
            cmd_generate(args.label)
        elif args.command == "add":
            cmd_add(args.key, args.label)
        elif args.command == "list":
            cmd_list()
        elif args.command == "revoke":
            cmd_revoke(key_value=args.key, key_id=args.key_id)
        elif args.command == "path":
            cmd_path()
    except AggregatorHostError as exc:
        print(f"✗ Error: {exc.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
