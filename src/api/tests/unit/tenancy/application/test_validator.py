"""Unit tests for AccessValidator.

Every attempt, allowed or denied, must produce exactly one audit entry,
and every denial must carry the same generic message whether or not the
resource exists.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from shared_kernel.middleware.tenant_context import TenantContext, TenantSource
from tenancy.application.security import hash_session_token
from tenancy.application.validator import AccessValidator
from tenancy.application.value_objects import InboundRequest, OwnerPrincipal
from tenancy.domain.aggregates import AdminSession
from tenancy.domain.exceptions import (
    AuthError,
    AuthorizationError,
    ResolutionError,
)
from tenancy.domain.value_objects import Decision, ReasonCode
from tenancy.ports.repositories import (
    IAdminSessionRepository,
    IBusinessRepository,
    ICityAdminRepository,
)

TOKEN = "cgs_test-token"


@pytest.fixture
def business_repository() -> AsyncMock:
    repo = AsyncMock(spec=IBusinessRepository)
    repo.get_by_owner.return_value = None
    repo.get_by_id.return_value = None
    return repo


@pytest.fixture
def admin_repository() -> AsyncMock:
    repo = AsyncMock(spec=ICityAdminRepository)
    repo.get_active_for_tenant.return_value = None
    return repo


@pytest.fixture
def session_repository() -> AsyncMock:
    repo = AsyncMock(spec=IAdminSessionRepository)
    repo.get_by_token_hash.return_value = None
    return repo


@pytest.fixture
def audit() -> MagicMock:
    return MagicMock()


@pytest.fixture
def probe() -> MagicMock:
    return MagicMock()


@pytest.fixture
def validator(
    resolver,
    business_repository,
    admin_repository,
    session_repository,
    audit,
    probe,
    clock,
) -> AccessValidator:
    return AccessValidator(
        resolver=resolver,
        business_repository=business_repository,
        admin_repository=admin_repository,
        session_repository=session_repository,
        audit=audit,
        probe=probe,
        clock=clock,
    )


@pytest.fixture
def owner() -> OwnerPrincipal:
    return OwnerPrincipal(user_id="owner-1", username="pat")


@pytest.fixture
def riverside_request() -> InboundRequest:
    return InboundRequest(host="riverside.example.com", route="/businesses/me")


def _only_entry(audit: MagicMock):
    assert audit.record.call_count == 1
    return audit.record.call_args.args[0]


class TestValidateOwner:
    """Tests for owner validation."""

    @pytest.mark.asyncio
    async def test_owner_of_business_in_tenant_is_allowed(
        self, validator, business_repository, audit, owner, riverside_request,
        make_business, fixed_now,
    ):
        business = make_business(tenant="riverside")
        business_repository.get_by_owner.return_value = business

        result = await validator.validate_owner(riverside_request, owner)

        assert result.resource_id == business.id
        assert result.tenant == "riverside"
        assert result.principal_id == "owner-1"
        assert result.resource is business
        assert result.tenant_context.source == TenantSource.HOSTNAME

        entry = _only_entry(audit)
        assert entry.decision == Decision.ALLOW
        assert entry.reason_code == ReasonCode.OK
        assert entry.timestamp == fixed_now
        assert entry.principal_id == "owner-1"
        assert entry.route == "/businesses/me"
        assert entry.resolved_tenant == "riverside"
        assert entry.resource_tenant == "riverside"

    @pytest.mark.asyncio
    async def test_business_tenant_compared_case_insensitively(
        self, validator, business_repository, owner, riverside_request, make_business
    ):
        business_repository.get_by_owner.return_value = make_business(
            tenant=" RIVERSIDE "
        )

        result = await validator.validate_owner(riverside_request, owner)

        assert result.tenant == "riverside"

    @pytest.mark.asyncio
    async def test_missing_principal_is_401_before_any_lookup(
        self, validator, business_repository, franchise_repository, audit,
        riverside_request,
    ):
        with pytest.raises(AuthError) as exc_info:
            await validator.validate_owner(riverside_request, None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.reason == ReasonCode.UNAUTHENTICATED
        franchise_repository.get_by_subdomain.assert_not_called()
        business_repository.get_by_owner.assert_not_called()
        entry = _only_entry(audit)
        assert entry.decision == Decision.DENY
        assert entry.reason_code == ReasonCode.UNAUTHENTICATED
        assert entry.principal_id is None

    @pytest.mark.asyncio
    async def test_unresolved_tenant_is_400(
        self, validator, business_repository, audit, owner
    ):
        request = InboundRequest(host="localhost:3000", route="/businesses/me")

        with pytest.raises(ResolutionError) as exc_info:
            await validator.validate_owner(request, owner)

        assert exc_info.value.status_code == 400
        business_repository.get_by_owner.assert_not_called()
        entry = _only_entry(audit)
        assert entry.reason_code == ReasonCode.NO_TENANT
        assert entry.resolved_tenant is None

    @pytest.mark.asyncio
    async def test_override_on_tenant_host_is_403(self, validator, audit, owner):
        request = InboundRequest(
            host="riverside.example.com", tenant_override="lakeside"
        )

        with pytest.raises(ResolutionError) as exc_info:
            await validator.validate_owner(request, owner, allow_query_override=True)

        assert exc_info.value.status_code == 403
        assert _only_entry(audit).reason_code == ReasonCode.OVERRIDE_REJECTED

    @pytest.mark.asyncio
    async def test_no_business_is_403(
        self, validator, audit, owner, riverside_request
    ):
        with pytest.raises(AuthorizationError) as exc_info:
            await validator.validate_owner(riverside_request, owner)

        assert exc_info.value.status_code == 403
        assert exc_info.value.public_message == "Access denied"
        assert _only_entry(audit).reason_code == ReasonCode.RESOURCE_NOT_FOUND

    @pytest.mark.asyncio
    async def test_business_in_other_tenant_is_403(
        self, validator, business_repository, audit, probe, owner,
        riverside_request, make_business,
    ):
        business = make_business(tenant="lakeside")
        business_repository.get_by_owner.return_value = business

        with pytest.raises(AuthorizationError) as exc_info:
            await validator.validate_owner(riverside_request, owner)

        assert exc_info.value.reason == ReasonCode.TENANT_MISMATCH
        entry = _only_entry(audit)
        assert entry.decision == Decision.DENY
        assert entry.resolved_tenant == "riverside"
        assert entry.resource_tenant == "lakeside"
        probe.tenant_mismatch.assert_called_once_with(
            principal_id="owner-1",
            resolved_tenant="riverside",
            resource_tenant="lakeside",
            resource_id=business.id.value,
        )

    @pytest.mark.asyncio
    async def test_mismatch_and_not_found_look_identical(
        self, validator, business_repository, owner, riverside_request,
        make_business,
    ):
        with pytest.raises(AuthorizationError) as not_found:
            await validator.validate_owner(riverside_request, owner)

        business_repository.get_by_owner.return_value = make_business(
            tenant="lakeside"
        )
        with pytest.raises(AuthorizationError) as mismatch:
            await validator.validate_owner(riverside_request, owner)

        assert not_found.value.status_code == mismatch.value.status_code
        assert not_found.value.public_message == mismatch.value.public_message
        assert "lakeside" not in mismatch.value.public_message

    @pytest.mark.asyncio
    async def test_datastore_error_is_denied(
        self, validator, business_repository, audit, probe, owner,
        riverside_request,
    ):
        error = OperationalError("SELECT", {}, Exception("timeout"))
        business_repository.get_by_owner.side_effect = error

        with pytest.raises(AuthorizationError) as exc_info:
            await validator.validate_owner(riverside_request, owner)

        assert exc_info.value.reason == ReasonCode.DATASTORE_ERROR
        assert exc_info.value.status_code == 403
        assert _only_entry(audit).reason_code == ReasonCode.DATASTORE_ERROR
        probe.datastore_error.assert_called_once_with(
            operation="get_business_by_owner", error=error
        )

    @pytest.mark.asyncio
    async def test_unexpected_error_is_audited_and_propagates(
        self, validator, business_repository, audit, probe, owner,
        riverside_request, make_business,
    ):
        business_repository.get_by_owner.return_value = make_business(
            tenant="riverside"
        )
        probe.access_granted.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await validator.validate_owner(riverside_request, owner)

        entry = _only_entry(audit)
        assert entry.decision == Decision.DENY
        assert entry.reason_code == ReasonCode.INTERNAL_ERROR
        assert entry.resolved_tenant == "riverside"

    @pytest.mark.asyncio
    async def test_query_override_allowed_on_localhost(
        self, validator, business_repository, owner, make_business
    ):
        business_repository.get_by_owner.return_value = make_business(
            tenant="riverside"
        )
        request = InboundRequest(host="localhost:3000", tenant_override="riverside")

        result = await validator.validate_owner(
            request, owner, allow_query_override=True
        )

        assert result.tenant == "riverside"
        assert result.tenant_context.source == TenantSource.QUERY


@pytest.fixture
def live_session(fixed_now, make_admin):
    admin = make_admin(tenant="riverside")
    session = AdminSession(
        token_hash=hash_session_token(TOKEN),
        admin_id=admin.id,
        tenant="riverside",
        created_at=fixed_now - timedelta(hours=1),
        expires_at=fixed_now + timedelta(hours=7),
    )
    return admin, session


class TestValidateAdmin:
    """Tests for admin session validation."""

    @pytest.mark.asyncio
    async def test_active_admin_of_tenant_is_allowed(
        self, validator, session_repository, admin_repository, audit,
        riverside_request, live_session,
    ):
        admin, session = live_session
        session_repository.get_by_token_hash.return_value = session
        admin_repository.get_active_for_tenant.return_value = admin

        result = await validator.validate_admin(riverside_request, TOKEN)

        assert result.admin_id == admin.id
        assert result.tenant == "riverside"
        assert result.username == "alice"
        session_repository.get_by_token_hash.assert_called_once_with(
            hash_session_token(TOKEN)
        )
        admin_repository.get_active_for_tenant.assert_called_once_with(
            admin.id, "riverside"
        )
        entry = _only_entry(audit)
        assert entry.decision == Decision.ALLOW
        assert entry.principal_id == admin.id.value

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token_is_401(
        self, validator, session_repository, audit, riverside_request, token
    ):
        with pytest.raises(AuthError):
            await validator.validate_admin(riverside_request, token)

        session_repository.get_by_token_hash.assert_not_called()
        assert _only_entry(audit).reason_code == ReasonCode.UNAUTHENTICATED

    @pytest.mark.asyncio
    async def test_unknown_token_is_401(self, validator, audit, riverside_request):
        with pytest.raises(AuthError) as exc_info:
            await validator.validate_admin(riverside_request, TOKEN)

        assert exc_info.value.reason == ReasonCode.SESSION_INVALID
        assert _only_entry(audit).reason_code == ReasonCode.SESSION_INVALID

    @pytest.mark.asyncio
    async def test_expired_session_is_401(
        self, validator, session_repository, riverside_request, live_session,
        fixed_now,
    ):
        _, session = live_session
        session_repository.get_by_token_hash.return_value = AdminSession(
            token_hash=session.token_hash,
            admin_id=session.admin_id,
            tenant=session.tenant,
            created_at=session.created_at,
            expires_at=fixed_now,
        )

        with pytest.raises(AuthError) as exc_info:
            await validator.validate_admin(riverside_request, TOKEN)

        assert exc_info.value.reason == ReasonCode.SESSION_INVALID

    @pytest.mark.asyncio
    async def test_revoked_session_is_401(
        self, validator, session_repository, probe, riverside_request,
        live_session, fixed_now,
    ):
        _, session = live_session
        session_repository.get_by_token_hash.return_value = AdminSession(
            token_hash=session.token_hash,
            admin_id=session.admin_id,
            tenant=session.tenant,
            created_at=session.created_at,
            expires_at=session.expires_at,
            revoked_at=fixed_now - timedelta(minutes=5),
        )

        with pytest.raises(AuthError):
            await validator.validate_admin(riverside_request, TOKEN)

        probe.session_invalid.assert_called_once_with(reason="revoked")

    @pytest.mark.asyncio
    async def test_session_from_other_city_is_403(
        self, validator, session_repository, admin_repository, audit,
        live_session,
    ):
        _, session = live_session
        session_repository.get_by_token_hash.return_value = session
        request = InboundRequest(host="lakeside.example.com")

        with pytest.raises(AuthorizationError) as exc_info:
            await validator.validate_admin(request, TOKEN)

        assert exc_info.value.reason == ReasonCode.TENANT_MISMATCH
        admin_repository.get_active_for_tenant.assert_not_called()
        entry = _only_entry(audit)
        assert entry.resolved_tenant == "lakeside"
        assert entry.resource_tenant == "riverside"

    @pytest.mark.asyncio
    async def test_deactivated_admin_is_403(
        self, validator, session_repository, audit, riverside_request,
        live_session,
    ):
        _, session = live_session
        session_repository.get_by_token_hash.return_value = session

        with pytest.raises(AuthorizationError) as exc_info:
            await validator.validate_admin(riverside_request, TOKEN)

        assert exc_info.value.reason == ReasonCode.ADMIN_NOT_CONFIRMED
        assert _only_entry(audit).reason_code == ReasonCode.ADMIN_NOT_CONFIRMED

    @pytest.mark.asyncio
    async def test_session_lookup_error_is_denied(
        self, validator, session_repository, riverside_request
    ):
        session_repository.get_by_token_hash.side_effect = RuntimeError("down")

        with pytest.raises(AuthorizationError) as exc_info:
            await validator.validate_admin(riverside_request, TOKEN)

        assert exc_info.value.reason == ReasonCode.DATASTORE_ERROR


class TestValidateAdminBusiness:
    """Tests for admin access to a specific business."""

    @pytest.fixture
    def confirmed_admin(self, session_repository, admin_repository, live_session):
        admin, session = live_session
        session_repository.get_by_token_hash.return_value = session
        admin_repository.get_active_for_tenant.return_value = admin
        return admin

    @pytest.mark.asyncio
    async def test_business_in_admin_tenant_is_allowed(
        self, validator, business_repository, audit, riverside_request,
        confirmed_admin, make_business,
    ):
        business = make_business(tenant="riverside")
        business_repository.get_by_id.return_value = business

        result = await validator.validate_admin_business(
            riverside_request, TOKEN, business.id.value.lower()
        )

        assert result.business is business
        assert result.admin.admin_id == confirmed_admin.id
        business_repository.get_by_id.assert_called_once_with(business.id)
        assert _only_entry(audit).decision == Decision.ALLOW

    @pytest.mark.asyncio
    async def test_business_in_other_tenant_is_403(
        self, validator, business_repository, audit, riverside_request,
        confirmed_admin, make_business,
    ):
        business = make_business(tenant="lakeside")
        business_repository.get_by_id.return_value = business

        with pytest.raises(AuthorizationError) as exc_info:
            await validator.validate_admin_business(
                riverside_request, TOKEN, business.id.value
            )

        assert exc_info.value.reason == ReasonCode.TENANT_MISMATCH
        entry = _only_entry(audit)
        assert entry.resource_tenant == "lakeside"
        assert entry.principal_id == confirmed_admin.id.value

    @pytest.mark.asyncio
    async def test_malformed_id_is_treated_as_missing(
        self, validator, business_repository, audit, riverside_request,
        confirmed_admin,
    ):
        with pytest.raises(AuthorizationError) as exc_info:
            await validator.validate_admin_business(
                riverside_request, TOKEN, "not-a-ulid"
            )

        assert exc_info.value.reason == ReasonCode.RESOURCE_NOT_FOUND
        business_repository.get_by_id.assert_not_called()
        assert _only_entry(audit).reason_code == ReasonCode.RESOURCE_NOT_FOUND

    @pytest.mark.asyncio
    async def test_unauthenticated_admin_never_reads_business(
        self, validator, business_repository, riverside_request
    ):
        with pytest.raises(AuthError):
            await validator.validate_admin_business(
                riverside_request, None, "01ARZ3NDEKTSV4RRFFQ69G5FAV"
            )

        business_repository.get_by_id.assert_not_called()


class TestEnsureTenantWrite:
    """Tests for the tenant guard on writes."""

    @pytest.fixture
    def context(self) -> TenantContext:
        return TenantContext(
            tenant="riverside",
            source=TenantSource.HOSTNAME,
            hostname="riverside.example.com",
            is_fallback=False,
        )

    def test_same_tenant_is_allowed(self, validator, audit, context):
        validator.ensure_tenant_write(context, "Riverside", principal_id="owner-1")

        entry = _only_entry(audit)
        assert entry.decision == Decision.ALLOW
        assert entry.principal_id == "owner-1"

    @pytest.mark.asyncio
    async def test_guards_write_after_owner_validation(
        self, validator, business_repository, audit, owner, riverside_request,
        make_business,
    ):
        business_repository.get_by_owner.return_value = make_business(
            tenant="riverside"
        )
        validated = await validator.validate_owner(riverside_request, owner)

        with pytest.raises(AuthorizationError):
            validator.ensure_tenant_write(
                validated.tenant_context,
                "lakeside",
                principal_id=validated.principal_id,
                route="/businesses/me/offers",
            )

        decisions = [c.args[0].decision for c in audit.record.call_args_list]
        assert decisions == [Decision.ALLOW, Decision.DENY]

    @pytest.mark.parametrize("target", ["lakeside", "", "   ", None])
    def test_other_or_blank_tenant_is_403(self, validator, audit, context, target):
        with pytest.raises(AuthorizationError) as exc_info:
            validator.ensure_tenant_write(context, target, route="/offers")

        assert exc_info.value.reason == ReasonCode.TENANT_MISMATCH
        entry = _only_entry(audit)
        assert entry.decision == Decision.DENY
        assert entry.route == "/offers"
