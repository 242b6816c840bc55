#!/usr/bin/env python3
"""Manage the shared login password in the OS keychain.

Usage:
    python -m scripts.set_password set                 # prompt for a new password
    python -m scripts.set_password clear               # remove it from the keychain
    python -m scripts.set_password migrate [--clean]   # move APP_PASSWORD out of .env
"""

import argparse
import getpass
import re
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import dotenv_values

from services.credential_manager import delete_credential, get_credential, set_credential

PASSWORD_KEY = "APP_PASSWORD"


def prompt_and_store() -> bool:
    """Ask for the password twice and store it. Returns True on success."""
    first = getpass.getpass("New family password: ")
    if not first.strip():
        print("Password must not be empty.")
        return False
    if getpass.getpass("Repeat password: ") != first:
        print("Passwords do not match.")
        return False
    if not set_credential(PASSWORD_KEY, first):
        print("Failed to store the password in the keychain.")
        return False
    print(f"Stored {PASSWORD_KEY} in keychain.")
    return True


def migrate(env_path: Path, *, clean: bool = False) -> bool:
    """Copy ``APP_PASSWORD`` from ``.env`` into the keychain.

    Args:
        env_path: Path to the ``.env`` file.
        clean: If ``True``, remove the ``APP_PASSWORD`` line from ``.env``
            once the keychain holds the same value.
    """
    if not env_path.exists():
        print(f"No .env file found at {env_path}")
        return False

    value = dotenv_values(env_path).get(PASSWORD_KEY)
    if not value:
        print(f"{PASSWORD_KEY} is empty or missing in {env_path}")
        return False

    if get_credential(PASSWORD_KEY) == value:
        print(f"{PASSWORD_KEY} is already in the keychain.")
    elif set_credential(PASSWORD_KEY, value):
        print(f"Stored {PASSWORD_KEY} in keychain.")
    else:
        print(f"Failed to store {PASSWORD_KEY} in keychain.")
        return False

    if clean:
        _remove_env_line(env_path, PASSWORD_KEY)
    return True


def _remove_env_line(env_path: Path, key: str) -> None:
    """Drop ``key=...`` from .env, preserving everything else."""
    pattern = re.compile(rf"^{re.escape(key)}\s*=")
    lines = env_path.read_text().splitlines(keepends=True)
    env_path.write_text("".join(line for line in lines if not pattern.match(line)))
    print(f"Removed {key} from {env_path}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Manage the famfolio login password")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("set", help="Prompt for a password and store it in the keychain")
    sub.add_parser("clear", help="Remove the password from the keychain")
    migrate_parser = sub.add_parser("migrate", help="Move APP_PASSWORD from .env to the keychain")
    migrate_parser.add_argument(
        "--clean", action="store_true", help="Remove APP_PASSWORD from .env afterwards"
    )
    migrate_parser.add_argument(
        "--env-file",
        type=Path,
        default=Path(__file__).parent.parent / ".env",
        help="Path to .env file (default: backend/.env)",
    )

    args = parser.parse_args(argv)
    if args.command == "set":
        ok = prompt_and_store()
    elif args.command == "clear":
        ok = delete_credential(PASSWORD_KEY)
        print("Removed password from keychain." if ok else "No password stored in keychain.")
    else:
        ok = migrate(args.env_file, clean=args.clean)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
