#!/usr/bin/env python3
"""
Grants (or revokes) the `admin` custom claim that the auth gate maps to role='admin'.

Usage:
    python -m haatbazar.admin_claim <user_email> [--revoke]

Credentials come from the same settings as the API (inline env credentials first, then
`FIREBASE_CRED_FILE`). The user has to sign in again before the new claim shows up in
their ID token.
"""
import sys
from typing import List, Optional

import firebase_admin
from firebase_admin import auth, credentials

from haatbazar.config import Settings, settings as default_settings

USAGE = "Usage: python -m haatbazar.admin_claim <user_email> [--revoke]"


def init_firebase(settings: Settings):
    cred = credentials.Certificate(settings.inline_credentials or settings.firebase_cred_file)
    options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else {}
    return firebase_admin.initialize_app(cred, options, name="haatbazar-admin-claim")


def set_admin_claim(user_email: str, admin: bool = True, app=None) -> dict:
    """Merge `admin` into the user's existing custom claims; returns the claims now stored."""
    user = auth.get_user_by_email(user_email, app=app)
    claims = dict(user.custom_claims or {})
    if admin:
        claims["admin"] = True
    else:
        claims.pop("admin", None)
    auth.set_custom_user_claims(user.uid, claims or None, app=app)
    return auth.get_user(user.uid, app=app).custom_claims or {}


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    revoke = "--revoke" in args
    args = [a for a in args if a != "--revoke"]
    if len(args) != 1:
        print(USAGE)
        return 1

    user_email = args[0]
    app = init_firebase(settings or default_settings)
    try:
        claims = set_admin_claim(user_email, admin=not revoke, app=app)
    except auth.UserNotFoundError:
        print(f"User not found: {user_email}")
        return 1
    finally:
        firebase_admin.delete_app(app)

    print(f"Custom claims for {user_email}: {claims}")
    print("The user will need to sign out and sign in again for the change to take effect.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
