"""Password hashing and JWT access tokens."""

from datetime import timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from skyview.config.schema import AuthConfig
from skyview.errors import AuthError, ConfigurationError
from skyview.models.common import UserId, utc_now
from skyview.models.user import User

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user: User, config: AuthConfig) -> str:
    """Signed token carrying the user id (`sub`) and email, valid for token_ttl_days."""
    _require_secret(config)
    now = utc_now()
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(days=config.token_ttl_days)).timestamp()),
    }
    return jwt.encode(claims, config.jwt_secret, algorithm=config.algorithm)


def decode_access_token(token: str, config: AuthConfig) -> UserId:
    """Return the user id in a valid token. Raises AuthError otherwise."""
    _require_secret(config)
    try:
        claims = jwt.decode(token, config.jwt_secret, algorithms=[config.algorithm])
    except JWTError as e:
        raise AuthError("Invalid or expired token") from e

    sub = claims.get("sub")
    try:
        return int(sub)
    except (TypeError, ValueError) as e:
        raise AuthError("Invalid or expired token") from e


def extract_token(authorization: str | None, x_auth_token: str | None = None) -> str | None:
    """Accept `Bearer <token>`, a bare token in Authorization, or x-auth-token."""
    header = (authorization or "").strip()
    if header.startswith("Bearer "):
        token = header[len("Bearer "):].strip()
    else:
        token = header or (x_auth_token or "").strip()
    return token or None


def _require_secret(config: AuthConfig) -> None:
    if not config.jwt_secret:
        raise ConfigurationError("JWT_SECRET is not set")
