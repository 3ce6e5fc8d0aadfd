"""
Magic-link token decoding.

The content API emails a link carrying a JWT:

    https://admin.example.com/verify?token=<jwt>

The panel turns that token into a `User` from its `sub`, `email` and `role`
claims. Decoding fails closed: a malformed token, a bad signature or a missing
or unknown claim raises `TokenDecodeError` and no session is established.
There is no default role.

When AUTH_TOKEN_SECRET is configured the HS256 signature and expiry are
verified; otherwise the claims are read as-is and the API remains the
authority that rejects a forged token (with a 401).
"""

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from cms_shared.config import AUTH_TOKEN_SECRET
from cms_shared.errors import TokenDecodeError
from cms_shared.models import User


def _claims(token: str, secret: str) -> dict:
    if secret:
        return jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            options={"verify_aud": False},
        )
    return jwt.get_unverified_claims(token)


def decode_magic_link_token(token: str, secret: str = AUTH_TOKEN_SECRET) -> User:
    token = (token or "").strip()
    if not token:
        raise TokenDecodeError("Token vacío")

    try:
        claims = _claims(token, secret)
    except ExpiredSignatureError:
        raise TokenDecodeError("Token expirado")
    except JWTError:
        raise TokenDecodeError("Token inválido")

    try:
        return User(
            id=claims.get("sub"),
            email=claims.get("email"),
            role=claims.get("role"),
            name=claims.get("name"),
        )
    except ValidationError:
        raise TokenDecodeError("Token inválido")
