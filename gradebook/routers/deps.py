from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header

from gradebook.core.config import settings
from gradebook.core.errors import PermissionDeniedError
from gradebook.i18n.th_messages import AuthMessages
from gradebook.schemas.auth import Role
from gradebook.services.portal import PortalRegistry, portal_registry
from gradebook.services.redemption import RedemptionCoordinator
from gradebook.services.roster_store import RosterRepository, build_roster_repository
from gradebook.services.security import Principal, principal_from_header


@lru_cache
def get_roster_repository() -> RosterRepository:
    return build_roster_repository(settings)


def get_portal_registry() -> PortalRegistry:
    return portal_registry


def get_redemption_coordinator(
    repository: RosterRepository = Depends(get_roster_repository),
) -> RedemptionCoordinator:
    return RedemptionCoordinator(repository)


def get_current_principal(authorization: str | None = Header(default=None)) -> Principal:
    return principal_from_header(authorization)


def require_teacher(principal: Principal = Depends(get_current_principal)) -> Principal:
    if principal.role is not Role.TEACHER:
        raise PermissionDeniedError(AuthMessages.TEACHER_ONLY)
    return principal


def require_student(principal: Principal = Depends(get_current_principal)) -> Principal:
    if principal.role is not Role.STUDENT:
        raise PermissionDeniedError(AuthMessages.STUDENT_ONLY)
    return principal
