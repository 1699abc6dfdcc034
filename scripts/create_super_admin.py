#!/usr/bin/env python3
"""
CLI utility to bootstrap a super admin account.

Super admins have no public registration endpoint; operators create them
directly against the credential store.

Usage:
    python scripts/create_super_admin.py --username root --name "Platform Admin" --access-level total
"""

import argparse
import getpass
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from turismo_core.auth.authenticator import Authenticator
from turismo_core.auth.credential_store import PostgresCredentialStore
from turismo_core.auth.exceptions import AuthError
from turismo_core.auth.password_hasher import PasswordHasher
from turismo_core.auth.token_codec import TokenCodec
from turismo_core.config import settings
from turismo_core.domain.auth import SuperAdminProfile


def main():
    parser = argparse.ArgumentParser(description="Create a super admin account")
    parser.add_argument("--username", required=True)
    parser.add_argument("--name", required=True)
    parser.add_argument("--access-level", default="total")
    parser.add_argument("--email", default=None)
    parser.add_argument("--dsn", default=None, help="Defaults to settings.POSTGRES_DSN")
    args = parser.parse_args()

    password = getpass.getpass("Password: ")
    if len(password) < 6:
        parser.error("password must be at least 6 characters")

    authenticator = Authenticator(
        store=PostgresCredentialStore(args.dsn),
        hasher=PasswordHasher(settings.BCRYPT_ROUNDS),
        # Not used for registration; login needs a real secret.
        codec=TokenCodec(settings.JWT_SECRET or "unused-for-registration"),
    )
    profile = SuperAdminProfile(
        username=args.username,
        name=args.name,
        access_level=args.access_level,
        email=args.email,
    )
    try:
        new_id = authenticator.create_super_admin(profile, password)
    except AuthError as e:
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        sys.exit(1)
    print(json.dumps({"id": new_id, "username": args.username}, indent=2))


if __name__ == "__main__":
    main()
