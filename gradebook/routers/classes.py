from typing import List

from fastapi import APIRouter, Depends, Response

from gradebook.core.errors import ClassNotFoundError, RosterStoreUnavailableError
from gradebook.core.logging import get_logger
from gradebook.core.metrics import inc_counter
from gradebook.i18n.th_messages import RosterMessages
from gradebook.routers.deps import get_roster_repository, require_teacher
from gradebook.schemas.report import ClassStatsOut, ClassSummaryOut, ReportCardOut, SaveResultOut
from gradebook.schemas.roster import Student, SubjectClass
from gradebook.services.class_stats import compute_class_stats
from gradebook.services.export import roster_to_csv
from gradebook.services.report_cards import build_report_card
from gradebook.services.roster_store import RosterRepository

router = APIRouter(prefix="/classes", tags=["classes"], dependencies=[Depends(require_teacher)])
logger = get_logger("routers.classes", component="router")


def _load_rosters(repository: RosterRepository) -> List[SubjectClass]:
    rosters = repository.load_all()
    if not rosters:
        # empty means "no data available", never "zero classes configured"
        raise RosterStoreUnavailableError()
    return rosters


def _load_roster(repository: RosterRepository, class_id: str) -> SubjectClass:
    for roster in _load_rosters(repository):
        if roster.id == class_id:
            return roster
    raise ClassNotFoundError(RosterMessages.CLASS_NOT_FOUND.format(class_id=class_id))


@router.get("", response_model=List[ClassSummaryOut])
def list_classes(repository: RosterRepository = Depends(get_roster_repository)):
    return [
        ClassSummaryOut(id=roster.id, name=roster.name, student_count=len(roster.students))
        for roster in _load_rosters(repository)
    ]


@router.get("/{class_id}", response_model=List[ReportCardOut])
def get_class(class_id: str, repository: RosterRepository = Depends(get_roster_repository)):
    roster = _load_roster(repository, class_id)
    return [ReportCardOut.from_card(build_report_card(student, roster)) for student in roster.students]


@router.put("/{class_id}/students", response_model=SaveResultOut)
def replace_students(
    class_id: str,
    students: List[Student],
    repository: RosterRepository = Depends(get_roster_repository),
):
    """Bulk editor save: the submitted list replaces the whole roster."""
    ok = repository.save_roster(class_id, students)
    inc_counter("classes.save.success" if ok else "classes.save.failed")
    logger.info(
        "class_roster_saved" if ok else "class_roster_save_failed",
        extra={"structured_data": {"class_id": class_id, "student_count": len(students)}},
    )
    if not ok:
        raise RosterStoreUnavailableError(RosterMessages.SAVE_FAILED, detail={"class_id": class_id})
    return SaveResultOut(ok=True, class_id=class_id, student_count=len(students), message=RosterMessages.SAVE_SUCCESS)


@router.get("/{class_id}/stats", response_model=ClassStatsOut)
def class_stats(class_id: str, repository: RosterRepository = Depends(get_roster_repository)):
    roster = _load_roster(repository, class_id)
    return ClassStatsOut.from_stats(class_id, compute_class_stats(roster.students))


@router.get("/{class_id}/export.csv")
def export_class(class_id: str, repository: RosterRepository = Depends(get_roster_repository)):
    roster = _load_roster(repository, class_id)
    return Response(
        content=roster_to_csv(roster.students),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{class_id}_grades.csv"'},
    )
