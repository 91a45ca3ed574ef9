"""Principal extraction: owner bearer tokens and admin session tokens.

These dependencies never reject a credential themselves. A missing or
invalid credential yields None and the access validator turns that into
an audited 401. An unreachable identity provider is a 500, not a 401.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2AuthorizationCodeBearer

from infrastructure.settings import (
    SessionSettings,
    get_oidc_settings,
    get_session_settings,
)
from shared_kernel.auth import InvalidTokenError, JWKSFetchError, JWTValidator
from shared_kernel.auth.observability import DefaultJWTValidatorProbe
from tenancy.application.value_objects import OwnerPrincipal


def _create_oauth2_scheme() -> OAuth2AuthorizationCodeBearer:
    """Create the OAuth2 security scheme so Swagger UI can sign owners in."""
    issuer = get_oidc_settings().issuer_url

    return OAuth2AuthorizationCodeBearer(
        authorizationUrl=f"{issuer}/protocol/openid-connect/auth",
        tokenUrl=f"{issuer}/protocol/openid-connect/token",
        refreshUrl=f"{issuer}/protocol/openid-connect/token",
        scopes={
            "openid": "OpenID Connect",
            "profile": "User profile",
        },
        auto_error=False,
    )


oauth2_scheme = _create_oauth2_scheme()


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get cached JWT validator.

    A single instance is reused across requests so its JWKS cache is
    shared.
    """
    settings = get_oidc_settings()
    return JWTValidator(
        issuer_url=settings.issuer_url,
        audience=settings.audience,
        probe=DefaultJWTValidatorProbe(),
        user_id_claim=settings.user_id_claim,
        username_claim=settings.username_claim,
    )


async def get_owner_principal(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    token: Annotated[str | None, Depends(oauth2_scheme)] = None,
) -> OwnerPrincipal | None:
    """Validate the owner's bearer token.

    Returns:
        OwnerPrincipal, or None when no token was sent or it is invalid

    Raises:
        HTTPException: 500 if the signing keys cannot be fetched
    """
    if token is None:
        return None

    try:
        claims = await validator.validate_token(token)
    except InvalidTokenError:
        # The validator probe already logged the cause
        return None
    except JWKSFetchError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication unavailable",
        ) from e

    return OwnerPrincipal(
        user_id=claims.sub,
        username=claims.preferred_username or claims.sub,
    )


def get_admin_session_token(
    request: Request,
    settings: Annotated[SessionSettings, Depends(get_session_settings)],
) -> str | None:
    """Read the opaque admin token from the session cookie or header.

    The header wins when both are sent.
    """
    token = request.headers.get(settings.header_name) or request.cookies.get(
        settings.cookie_name
    )
    if token is None or not token.strip():
        return None
    return token.strip()
