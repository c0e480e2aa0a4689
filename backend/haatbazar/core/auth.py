"""
haatbazar/core/auth.py - Authentication gate.

`Authorization: Bearer <Firebase ID token>` is verified with the Firebase Admin SDK
(revocation checked) and turned into a `Principal`:
- anonymous provider      -> role='guest'
- custom claim admin=True -> role='admin'
- everything else         -> role='user'

Services only ever see `Principal.uid` and `Principal.role`. Development mock tokens
(`mock_jwt_token_<uid>`) are accepted only when `allow_mock_tokens` is enabled.
"""
from typing import Optional

from fastapi import Depends, Request
from firebase_admin import auth as fb_auth

from haatbazar.config import Settings
from haatbazar.core.deps import get_app_settings
from haatbazar.core.errors import AuthenticationRequired, PermissionDenied
from haatbazar.schemas.principal import Principal

MOCK_PREFIX = "mock_jwt_token_"


def _extract_bearer_token(request: Request) -> Optional[str]:
    """Token from `Authorization: Bearer <id_token>`, or None."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def _decode_mock_token(mock_token: str) -> dict:
    """
    Format: mock_jwt_token_<uid>; a uid containing 'anonymous' yields a guest.
    """
    uid = mock_token[len(MOCK_PREFIX):]
    if not uid:
        raise AuthenticationRequired("Invalid mock token format")
    return {
        "uid": uid,
        "email": None,
        "name": None,
        "firebase": {"sign_in_provider": "anonymous" if "anonymous" in uid else "password"},
        "admin": False,
    }


def _decode_id_token(id_token: str, settings: Settings) -> dict:
    if id_token.startswith(MOCK_PREFIX) and settings.allow_mock_tokens:
        return _decode_mock_token(id_token)
    try:
        return fb_auth.verify_id_token(id_token, check_revoked=True)
    except fb_auth.ExpiredIdTokenError:
        raise AuthenticationRequired("Token expired")
    except fb_auth.RevokedIdTokenError:
        raise AuthenticationRequired("Session revoked")
    except Exception:
        raise AuthenticationRequired("Invalid authentication token")


def token_to_principal(decoded: dict) -> Principal:
    uid = decoded.get("uid") or decoded.get("user_id")
    if not uid:
        raise AuthenticationRequired("Token missing uid")

    provider = (decoded.get("firebase") or {}).get("sign_in_provider")
    if provider == "anonymous":
        role = "guest"
    elif decoded.get("admin") is True:
        role = "admin"
    else:
        role = "user"

    return Principal(
        uid=uid,
        role=role,
        email=decoded.get("email"),
        display_name=decoded.get("name"),
    )


# --------- FastAPI Dependencies --------- #

def get_principal(request: Request, settings: Settings = Depends(get_app_settings)) -> Principal:
    """Token required (guest/user/admin all accepted)."""
    token = _extract_bearer_token(request)
    if not token:
        raise AuthenticationRequired("Missing Authorization header")
    return token_to_principal(_decode_id_token(token, settings))


def require_non_guest(principal: Principal = Depends(get_principal)) -> Principal:
    """Rejects anonymous (guest) sessions with 403; use on checkout/review actions."""
    if principal.role == "guest":
        raise PermissionDenied("Guest users are not allowed for this action.")
    return principal


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if principal.role != "admin":
        raise PermissionDenied("Admin privilege required.")
    return principal
