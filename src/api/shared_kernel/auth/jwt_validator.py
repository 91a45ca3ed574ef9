"""Bearer token validation for business-owner principals.

Owners sign in through the platform's OIDC provider. This module verifies
the bearer JWT against the provider's JWKS and extracts the principal
identity. It makes no tenant decisions: a valid token proves who the
owner is, never which franchise they may act in.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import httpx
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe


@dataclass(frozen=True)
class TokenClaims:
    """Validated identity claims of a business owner."""

    sub: str
    preferred_username: str | None
    email: str | None = None


class InvalidTokenError(Exception):
    """Raised when JWT validation fails."""

    pass


class JWKSFetchError(Exception):
    """Raised when the issuer's signing keys cannot be fetched.

    Kept apart from ``InvalidTokenError``: an unreachable identity provider
    says nothing about the token.
    """

    pass


class JWKSCache:
    """Fetches and caches the signing keys of an OIDC issuer.

    The discovery document is read once per refresh so a rotated
    ``jwks_uri`` is picked up together with the keys.
    """

    def __init__(
        self,
        issuer_url: str,
        probe: JWTValidatorProbe,
        ttl: timedelta = timedelta(hours=24),
    ):
        self._issuer_url = issuer_url.rstrip("/")
        self._probe = probe
        self._ttl = ttl
        self._jwks: dict[str, Any] | None = None
        self._fetched_at: datetime | None = None
        self._lock = asyncio.Lock()

    def _is_fresh(self) -> bool:
        if self._jwks is None or self._fetched_at is None:
            return False
        return datetime.now(tz=timezone.utc) - self._fetched_at < self._ttl

    async def get(self) -> dict[str, Any]:
        """Return cached keys, refreshing them when stale.

        Raises:
            JWKSFetchError: If the keys cannot be fetched.
        """
        if self._is_fresh():
            self._probe.jwks_cache_hit()
            return self._jwks  # type: ignore[return-value]

        async with self._lock:
            if self._is_fresh():
                self._probe.jwks_cache_hit()
                return self._jwks  # type: ignore[return-value]
            return await self._refresh()

    async def _refresh(self) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient() as client:
                discovery = await client.get(
                    f"{self._issuer_url}/.well-known/openid-configuration"
                )
                discovery.raise_for_status()
                jwks_uri = discovery.json().get("jwks_uri")
                if not jwks_uri:
                    self._probe.jwks_fetch_failed(
                        error="Missing jwks_uri in OpenID configuration"
                    )
                    raise JWKSFetchError(
                        "OIDC provider missing jwks_uri in configuration"
                    )

                response = await client.get(jwks_uri)
                response.raise_for_status()
                jwks = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._probe.jwks_fetch_failed(error=str(e))
            raise JWKSFetchError(
                f"Failed to fetch JWKS from OIDC provider: {e}"
            ) from e

        self._jwks = jwks
        self._fetched_at = datetime.now(tz=timezone.utc)
        self._probe.jwks_fetched(key_count=len(jwks.get("keys", [])))
        return jwks


class JWTValidator:
    """Validates owner bearer tokens using the OIDC provider's JWKS.

    Validates signature, expiry, issuer and audience, then extracts the
    configured identity claims.
    """

    def __init__(
        self,
        issuer_url: str,
        audience: str,
        probe: JWTValidatorProbe,
        user_id_claim: str = "sub",
        username_claim: str = "preferred_username",
        jwks: JWKSCache | None = None,
    ):
        """Initialize the JWT validator.

        Args:
            issuer_url: The OIDC issuer URL.
            audience: Expected audience claim value.
            probe: Observability probe for logging events.
            user_id_claim: JWT claim to use for the principal ID.
            username_claim: JWT claim to use for the username.
            jwks: Key cache; one is created for the issuer when omitted.
        """
        self._issuer_url = issuer_url.rstrip("/")
        self._audience = audience
        self._probe = probe
        self._user_id_claim = user_id_claim
        self._username_claim = username_claim
        self._jwks = jwks or JWKSCache(issuer_url=self._issuer_url, probe=probe)

    async def validate_token(self, token: str) -> TokenClaims:
        """Validate a bearer JWT and return the owner's identity claims.

        Args:
            token: The JWT token string.

        Returns:
            TokenClaims for the authenticated owner.

        Raises:
            InvalidTokenError: If the token is malformed, expired, or fails
                verification.
            JWKSFetchError: If the signing keys cannot be fetched.
        """
        try:
            unverified_header = jwt.get_unverified_header(token)
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"Malformed token: {e}")
            raise InvalidTokenError(f"Invalid token format: {e}") from e

        if not unverified_header:
            self._probe.token_validation_failed(reason="Missing token header")
            raise InvalidTokenError("Invalid token: missing header")

        keys = await self._jwks.get()

        try:
            claims = jwt.decode(
                token=token,
                key=keys,
                algorithms=["RS256"],
                audience=self._audience,
                issuer=self._issuer_url,
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            self._probe.token_validation_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        subject = claims.get(self._user_id_claim)
        if subject is None or not str(subject).strip():
            self._probe.token_validation_failed(
                reason=f"Missing {self._user_id_claim} claim"
            )
            raise InvalidTokenError(f"Missing required claim: {self._user_id_claim}")

        username = claims.get(self._username_claim)
        email = claims.get("email")

        self._probe.token_validated(user_id=str(subject))

        return TokenClaims(
            sub=str(subject),
            preferred_username=str(username) if username is not None else None,
            email=str(email) if email is not None else None,
        )
