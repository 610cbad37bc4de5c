from fastapi import APIRouter, Depends

from gradebook.core.errors import AuthenticationError
from gradebook.core.logging import get_logger
from gradebook.i18n.th_messages import AuthMessages
from gradebook.routers.deps import get_portal_registry, get_roster_repository
from gradebook.schemas.auth import Role, StudentLogin, TeacherLogin, Token
from gradebook.services.portal import PortalRegistry
from gradebook.services.roster_store import RosterRepository
from gradebook.services.security import create_access_token, verify_teacher_password

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger("routers.auth", component="router")


@router.post("/teacher", response_model=Token)
def login_teacher(payload: TeacherLogin):
    if not verify_teacher_password(payload.password):
        logger.warning("teacher_login_rejected")
        raise AuthenticationError(AuthMessages.INVALID_TEACHER_PASSWORD)
    return Token(access_token=create_access_token("teacher", Role.TEACHER), role=Role.TEACHER)


@router.post("/student", response_model=Token)
def login_student(
    payload: StudentLogin,
    repository: RosterRepository = Depends(get_roster_repository),
    registry: PortalRegistry = Depends(get_portal_registry),
):
    student_id = payload.student_id.strip()
    # opening the portal doubles as the "is this id enrolled anywhere" check
    registry.open(repository, student_id)
    return Token(access_token=create_access_token(student_id, Role.STUDENT), role=Role.STUDENT)
