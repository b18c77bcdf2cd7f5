"""
Password hashing and token handling.

Tokens are HS256 JWTs whose ``sub`` claim is the account id. They are
accepted from an ``Authorization: Bearer`` header or, failing that, from the
``token`` cookie set at signup/signin.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request, Response
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings
from .errors import InvalidToken, Unauthorized

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(days=7)
COOKIE_NAME = "token"

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__default_rounds=10)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/signin", auto_error=False)


# PUBLIC_INTERFACE
def hash_password(password: str) -> str:
    """One-way salted bcrypt hash."""
    return pwd_context.hash(password)


# PUBLIC_INTERFACE
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Checks a password against a stored hash; malformed hashes never match."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


# PUBLIC_INTERFACE
def issue_token(account_id: int, secret_key: str, expires_delta: Optional[timedelta] = None) -> str:
    """Generates a signed token for the account, valid for seven days by default."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None else TOKEN_LIFETIME)
    to_encode = {"sub": str(account_id), "iat": now, "exp": expire}
    return jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)


# PUBLIC_INTERFACE
def verify_token(token: str, secret_key: str) -> int:
    """
    Decodes a token and returns the account id it was issued for.
    Raises InvalidToken on a bad signature, an expired token or a malformed payload.
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        logger.debug("Token rejected: %s", exc)
        raise InvalidToken() from exc
    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError) as exc:
        logger.debug("Token rejected: bad subject %r", subject)
        raise InvalidToken() from exc


# PUBLIC_INTERFACE
def extract_token(request: Request) -> Optional[str]:
    """Bearer header first, then the token cookie. Returns None when neither is present."""
    authorization = request.headers.get("Authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return request.cookies.get(COOKIE_NAME) or None


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# PUBLIC_INTERFACE
def get_current_account_id(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
) -> int:
    """
    Resolves the caller's account id for protected endpoints.

    The ``bearer`` parameter only documents the scheme in the OpenAPI schema;
    extraction itself goes through extract_token so the cookie fallback applies.
    """
    token = extract_token(request)
    if not token:
        raise Unauthorized()
    return verify_token(token, settings.secret_key)


# PUBLIC_INTERFACE
def set_auth_cookie(response: Response, token: str, settings: Settings):
    """Stores the token in an http-only, SameSite=Lax cookie with the token's lifetime."""
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.token_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )


# PUBLIC_INTERFACE
def clear_auth_cookie(response: Response):
    response.delete_cookie(key=COOKIE_NAME, path="/", httponly=True, samesite="lax")
