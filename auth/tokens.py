"""
auth/tokens.py -- JWT and password hashing utilities.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       user_id, email (as sub), role, and expiry. Verification returns None on
       any failure -- the guard turns that into Unauthorized.

  Passwords: bcrypt, used directly. The cost factor comes from
       Settings.bcrypt_rounds (minimum 12). The _DUMMY_HASH constant enables
       timing equalization in authenticate_user() so response time does not
       reveal whether an email is registered.

  SECRET_KEY: sourced from core.config.get_settings(). The Settings class
       validates the key at startup: dev mode (DEBUG=true) auto-generates a
       random key with a warning; production mode refuses to start without one.

Layer rule: no imports from api/ or cms/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from core.config import get_settings

if TYPE_CHECKING:
    from auth.models import Account
    from auth.store import AccountStore

logger = logging.getLogger("admissionshala.auth")

_settings = get_settings()

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Passwords longer than 72 bytes are silently truncated by bcrypt. The API
    layer caps password fields at 128 characters.
    """
    salt = bcrypt.gensalt(rounds=_settings.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    bcrypt.checkpw does the comparison in constant time. A malformed hash
    raises ValueError inside bcrypt; that is a mismatch, not a crash.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def hash_if_modified(stored: str | None, submitted: str | None) -> str | None:
    """Return the value to persist for an account's secret on a write.

    Hashing runs only when the secret actually changed:
      - nothing submitted          -> keep the stored hash
      - submitted equals the stored value (an already-hashed value written
        back unchanged)             -> keep it, never hash a hash
      - anything else              -> bcrypt the new plaintext
    """
    if submitted is None or submitted == stored:
        return stored
    return hash_password(submitted)


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("admissionshala_timing_dummy")


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(user_id: int, email: str, role: str, expire_seconds: int = 0) -> str:
    """Encode a signed JWT with user identity and configurable expiry.

    Args:
        user_id:        Numeric account ID stored in the DB.
        email:          Stored as the JWT subject claim.
        role:           Account role at issue time. Informational only -- the
                        guard re-reads the role from the store on every request.
        expire_seconds: Lifetime in seconds. If 0 (default), uses
                        Settings.token_expire_seconds.
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    expire = datetime.now(timezone.utc) + timedelta(seconds=duration)
    payload = {
        "sub": email,
        "user_id": user_id,
        "role": role,
        "exp": expire,
    }
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Decode and verify a JWT. Returns the payload dict or None on any failure.

    Expired tokens fail signature-time validation inside jose and land here
    as JWTError as well.
    """
    try:
        payload = jwt.decode(token, _settings.secret_key, algorithms=[_ALGORITHM])
    except JWTError:
        return None
    if "user_id" not in payload:
        return None
    return payload


# ---------------------------------------------------------------------------
# Account authentication (constant-time)
# ---------------------------------------------------------------------------


def authenticate_user(store: AccountStore, email: str, password: str) -> Account | None:
    """Authenticate an email/password login with timing equalization.

    Always runs bcrypt whether or not the account exists:
    - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Deactivated accounts are refused after the hash check so they cost the
    same as a wrong password.
    """
    account = store.get_by_email(email)
    if account is None or account.hashed_password is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, account.hashed_password):
        return None
    if not account.is_active:
        logger.info("Login refused for deactivated account %s", account.id)
        return None
    return account
