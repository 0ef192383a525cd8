#!/usr/bin/env python3
"""
Secure notes command line tool.
Works on the same notes document as the API; safe to run while it is serving.
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from securenotes.config import Settings
from securenotes.core.crypto import MasterKeySource
from securenotes.core.deps import build_note_service
from securenotes.core.error_handler import guarded
from securenotes.core.exceptions import ConfigurationError


def keygen(args, service):
    """Print a fresh SECRET_KEY value."""
    print(MasterKeySource.generate())
    return 0


def run(args, service):
    """Run one note operation and print the response envelope."""
    if args.command == "list":
        response = guarded(service.list_active)
    elif args.command == "trash":
        response = guarded(service.list_trash)
    elif args.command == "add":
        response = guarded(
            service.save_note,
            args.content,
            password=args.password,
            should_lock=args.lock,
            tags=args.tag,
        )
    elif args.command == "unlock":
        response = guarded(service.unlock_note, args.id, args.password)
    elif args.command == "delete":
        response = guarded(service.delete_note, args.id)
    elif args.command == "restore":
        response = guarded(service.restore_note, args.id)
    elif args.command == "purge":
        response = guarded(service.purge_note, args.id)
    else:
        raise ValueError(f"Unknown command: {args.command}")

    print(json.dumps(response.model_dump(mode="json", by_alias=True), ensure_ascii=False, indent=2))
    return 0 if response.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Secure notes")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("keygen", help="Generate a SECRET_KEY")
    sub.add_parser("list", help="List active notes")
    sub.add_parser("trash", help="List trashed notes")

    add = sub.add_parser("add", help="Create a note")
    add.add_argument("content")
    add.add_argument("--lock", action="store_true", help="Encrypt the note")
    add.add_argument("--password", help="Password for a locked note")
    add.add_argument("--tag", action="append", default=[], help="Tag (repeatable, comma separated)")

    unlock = sub.add_parser("unlock", help="Show a locked note")
    unlock.add_argument("id", type=int)
    unlock.add_argument("password")

    for name, help_text in (
        ("delete", "Move a note to the trash"),
        ("restore", "Restore a note from the trash"),
        ("purge", "Delete a trashed note forever"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("id", type=int)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "keygen":
        return keygen(args, None)

    try:
        service = build_note_service(Settings())
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2

    return run(args, service)


if __name__ == "__main__":
    sys.exit(main())
