from fastapi import APIRouter, Depends

from gradebook.routers.deps import (
    get_portal_registry,
    get_redemption_coordinator,
    get_roster_repository,
    require_student,
)
from gradebook.schemas.report import (
    RedeemRequest,
    RedemptionOutcomeOut,
    ReportCardOut,
    StudentReportOut,
)
from gradebook.services.portal import PortalRegistry, StudentPortal
from gradebook.services.redemption import RedemptionCoordinator
from gradebook.services.roster_store import RosterRepository
from gradebook.services.security import Principal

router = APIRouter(prefix="/students", tags=["students"])


def _student_report(portal: StudentPortal) -> StudentReportOut:
    return StudentReportOut(
        student_id=portal.student_id,
        name=portal.name,
        classes=[ReportCardOut.from_card(card) for card in portal.reports()],
    )


@router.get("/me", response_model=StudentReportOut)
def my_report(
    principal: Principal = Depends(require_student),
    repository: RosterRepository = Depends(get_roster_repository),
    registry: PortalRegistry = Depends(get_portal_registry),
):
    return _student_report(registry.get_or_open(repository, principal.subject))


@router.post("/me/refresh", response_model=StudentReportOut)
def refresh_report(
    principal: Principal = Depends(require_student),
    repository: RosterRepository = Depends(get_roster_repository),
    registry: PortalRegistry = Depends(get_portal_registry),
):
    return _student_report(registry.refresh(repository, principal.subject))


@router.post("/me/classes/{class_id}/redeem", response_model=RedemptionOutcomeOut)
def redeem_ticket(
    class_id: str,
    payload: RedeemRequest,
    principal: Principal = Depends(require_student),
    repository: RosterRepository = Depends(get_roster_repository),
    registry: PortalRegistry = Depends(get_portal_registry),
    coordinator: RedemptionCoordinator = Depends(get_redemption_coordinator),
):
    portal = registry.get_or_open(repository, principal.subject)
    outcome = coordinator.redeem(portal, class_id, confirm=lambda _preview: payload.confirmed)
    return RedemptionOutcomeOut.from_outcome(outcome)
