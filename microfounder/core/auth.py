"""
Request identity. Bearer JWTs are checked against the provider's JWKS;
with FF_USE_AUTH off every request runs as the dev user.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx
from jose import jwt, JWTError

from .config import get_settings
from .flags import get_flags

logger = logging.getLogger(__name__)

JWKS_TTL_SECONDS = 600


@dataclass
class AuthenticatedUser:
    user_id: str
    email: str = ""
    name: str = ""


DEV_USER = AuthenticatedUser(user_id="dev-user", email="dev@local", name="Dev User")


def parse_bearer(authorization: str) -> str:
    """Token from an 'Authorization: Bearer <token>' header value."""
    if not authorization:
        raise PermissionError("Missing Authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise PermissionError("Invalid Authorization header. Use: Bearer <token>")
    return token.strip()


def find_signing_key(jwks: dict, kid: Optional[str]) -> dict:
    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return {
                "kty": key["kty"],
                "kid": key["kid"],
                "use": key.get("use", "sig"),
                "n": key["n"],
                "e": key["e"],
            }
    raise JWTError(f"No JWKS key matches kid={kid!r}")


class JWKSVerifier:
    """Verifies RS256 tokens for one issuer domain. Key set cached for JWKS_TTL_SECONDS."""

    def __init__(self, domain: str, audience: str, algorithm: str = "RS256"):
        self.domain = domain
        self.audience = audience
        self.algorithm = algorithm
        self._jwks: Optional[dict] = None
        self._fetched_at = 0.0

    @property
    def issuer(self) -> str:
        return f"https://{self.domain}/"

    async def _get_jwks(self) -> dict:
        if self._jwks and time.time() - self._fetched_at < JWKS_TTL_SECONDS:
            return self._jwks

        async with httpx.AsyncClient() as client:
            resp = await client.get(f"{self.issuer}.well-known/jwks.json", timeout=10)
            resp.raise_for_status()
        self._jwks = resp.json()
        self._fetched_at = time.time()
        logger.info("Fetched JWKS for %s (%d keys)", self.domain, len(self._jwks.get("keys", [])))
        return self._jwks

    async def verify(self, token: str) -> AuthenticatedUser:
        jwks = await self._get_jwks()
        key = find_signing_key(jwks, jwt.get_unverified_header(token).get("kid"))
        claims = jwt.decode(
            token,
            key,
            algorithms=[self.algorithm],
            audience=self.audience,
            issuer=self.issuer,
        )
        return AuthenticatedUser(
            user_id=claims.get("sub", ""),
            email=claims.get("email", ""),
            name=claims.get("name", ""),
        )


_verifier: Optional[JWKSVerifier] = None


def get_verifier() -> JWKSVerifier:
    global _verifier
    if _verifier is None:
        settings = get_settings()
        _verifier = JWKSVerifier(
            domain=settings.auth_domain,
            audience=settings.auth_audience,
            algorithm=settings.auth_algorithm,
        )
    return _verifier


async def get_current_user(authorization: str = "") -> AuthenticatedUser:
    """Resolve the caller. Raises PermissionError when the token is missing or invalid."""
    if not get_flags().use_auth:
        return DEV_USER

    token = parse_bearer(authorization)
    try:
        user = await get_verifier().verify(token)
    except (JWTError, httpx.HTTPError) as e:
        raise PermissionError(f"Invalid token: {e}")

    if not user.user_id:
        raise PermissionError("Token missing sub claim")
    return user
