"""Security utilities: password hashing (bcrypt) and access tokens (JWT)."""

from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.constants import BCRYPT_ROUNDS
from app.core.enums import Role
from app.core.exceptions import InvalidToken

password_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(plain: str) -> str:
    return password_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    # Malformed stored hashes count as a mismatch
    try:
        return password_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def create_access_token(
    user_id: int,
    email: str,
    role: Role | str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_delta: timedelta = timedelta(hours=1),
) -> str:
    """Sign a token carrying the caller's identity and an expiry."""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "id": user_id,
        "email": email,
        "role": Role(role).value,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(claims, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str = "HS256") -> dict:
    """
    Verify signature and expiry, then return the identity claims.
    Raises InvalidToken for any failure; claims are only read after the signature checks out.
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except ExpiredSignatureError as e:
        raise InvalidToken("Token expired") from e
    except JWTError as e:
        raise InvalidToken("Invalid token") from e

    user_id = payload.get("id")
    email = payload.get("email")
    role = payload.get("role")
    if not isinstance(user_id, int) or not isinstance(email, str) or role not in {r.value for r in Role}:
        raise InvalidToken("Malformed token payload")
    return {"id": user_id, "email": email, "role": Role(role)}
