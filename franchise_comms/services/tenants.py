# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Tenant Onboarding — create a tenant and its first admin membership.

Creation runs on the privileged client. The tenant row and the membership
row are two separate writes; when the second one fails the tenant row is
deleted again so no tenant is left without a member.
"""

from __future__ import annotations

import logging

from franchise_comms.core.errors import ConflictError, NotFoundError, UpstreamError
from franchise_comms.core.identity import AuthUser
from franchise_comms.core.metrics import service_metrics
from franchise_comms.runtime.supabase_client import ServiceConfigError, SupabaseBackend
from franchise_comms.storage.repositories import (
    MembershipRepository,
    Row,
    StorageError,
    TenantRepository,
    UniqueViolation,
)

logger = logging.getLogger("franchise.services.tenants")

ADMIN_ROLE = "tenant_admin"
INITIAL_STATUS = "trial"


class TenantService:
    def __init__(self, backend: SupabaseBackend):
        self.backend = backend

    async def create(self, user: AuthUser, name: str, slug: str) -> Row:
        """Insert tenant, then membership; roll the tenant back if the membership fails."""
        try:
            admin = self.backend.admin()
        except ServiceConfigError as e:
            logger.error("Tenant creation unavailable: %s", e)
            raise UpstreamError("Service configuration error") from e

        tenants = TenantRepository(admin)
        memberships = MembershipRepository(admin)

        try:
            tenant = await tenants.create(name=name, slug=slug, status=INITIAL_STATUS)
        except UniqueViolation as e:
            raise ConflictError(
                "This name is already taken. Please choose a different name."
            ) from e
        except StorageError as e:
            raise UpstreamError("Failed to create tenant") from e
        if not tenant or not tenant.get("id"):
            raise UpstreamError("Failed to create tenant")

        tenant_id = tenant["id"]
        try:
            await memberships.create(user_id=user.id, tenant_id=tenant_id, role=ADMIN_ROLE)
        except StorageError as e:
            logger.error(
                "Membership creation failed for new tenant: %s", e.message,
                extra={"tenant_id": tenant_id, "user_id": user.id},
            )
            error = await self._rollback(tenants, tenant_id)
            raise error from e

        service_metrics.inc("tenants_created")
        logger.info(
            "Tenant '%s' created", slug,
            extra={"tenant_id": tenant_id, "user_id": user.id},
        )
        return tenant

    async def _rollback(self, tenants: TenantRepository, tenant_id: str) -> UpstreamError:
        """Delete an orphaned tenant; the returned error says whether that worked."""
        try:
            await tenants.delete(tenant_id)
        except StorageError as e:
            service_metrics.inc("tenant_orphans")
            logger.error(
                "Rollback of orphaned tenant failed: %s", e.message,
                extra={"tenant_id": tenant_id},
            )
            return UpstreamError("Tenant created but failed to create membership")
        service_metrics.inc("tenant_rollbacks")
        logger.warning("Orphaned tenant rolled back", extra={"tenant_id": tenant_id})
        return UpstreamError("Failed to create membership; tenant creation was rolled back")

    async def current(self, user: AuthUser) -> Row:
        """Tenant of the caller's active membership, read under row-level security."""
        memberships = MembershipRepository(self.backend.for_user(user.access_token))
        membership = await memberships.active_membership(user.id)
        if not membership:
            raise NotFoundError("No active tenant membership found")
        tenant = membership.get("tenant")
        if not tenant:
            logger.warning(
                "Active membership without readable tenant",
                extra={"tenant_id": membership.get("tenant_id"), "user_id": user.id},
            )
            raise NotFoundError("Tenant data not found")
        return tenant
