from __future__ import annotations

import json
import random
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Protocol, Sequence, runtime_checkable

import httpx
import pydantic

from gradebook.core.config import Settings
from gradebook.core.logging import get_logger
from gradebook.core.metrics import count_calls, inc_counter, timer
from gradebook.grading.constants import COLLECTED_SLOTS
from gradebook.grading.enums import SUBJECTS, SpecialStatus, SubjectId
from gradebook.schemas.roster import Student, SubjectClass

__all__ = [
    "RosterRepository",
    "Enrollment",
    "HttpRosterRepository",
    "MockRosterRepository",
    "parse_rosters",
    "find_student_enrollments",
    "generate_mock_rosters",
    "build_roster_repository",
]

logger = get_logger("services.roster_store", component="services")

_SUCCESS_STATUS = "success"


@runtime_checkable
class RosterRepository(Protocol):
    """Whole-roster persistence boundary.

    Implementations never raise: ``load_all`` answers ``[]`` and
    ``save_roster`` answers ``False`` for every kind of failure.
    """

    def load_all(self) -> List[SubjectClass]: ...

    def save_roster(self, class_id: str, students: Sequence[Student]) -> bool: ...


@dataclass(frozen=True, slots=True)
class Enrollment:
    """A student record together with the roster it was loaded from."""

    student: Student
    subject: SubjectClass

    @property
    def class_id(self) -> str:
        return self.subject.id


def _skip(event: str, exc: Exception, **fields: Any) -> None:
    inc_counter("roster_store.rows_skipped")
    logger.warning(event, extra={"structured_data": {**fields, "error": str(exc)}})


def _parse_students(class_id: str, rows: list[Any]) -> List[Student]:
    students = []
    for position, row in enumerate(rows):
        try:
            students.append(Student.model_validate(row))
        except pydantic.ValidationError as exc:
            _skip("roster_row_skipped", exc, class_id=class_id, row=position)
    return students


def parse_rosters(payload: Any) -> List[SubjectClass]:
    """Validate a store payload into rosters.

    Records that fail validation are skipped and logged one by one, so a
    blank sheet row or a mistyped status cell costs only that row. Raises
    ``ValueError`` only when the payload is not a list at all.
    """
    if not isinstance(payload, list):
        raise ValueError(f"expected a list of classes, got {type(payload).__name__}")
    rosters = []
    for position, entry in enumerate(payload):
        try:
            if not isinstance(entry, dict):
                raise ValueError(f"expected a class object, got {type(entry).__name__}")
            rows = entry.get("students")
            if rows is not None and not isinstance(rows, list):
                raise ValueError(f"expected a list of students, got {type(rows).__name__}")
            roster = SubjectClass.model_validate({**entry, "students": []})
        except ValueError as exc:
            _skip("roster_class_skipped", exc, position=position)
            continue
        rosters.append(roster.model_copy(update={"students": _parse_students(roster.id, rows or [])}))
    return rosters


def _roster_body(class_id: str, students: Sequence[Student]) -> dict[str, Any]:
    return {"sheetId": class_id, "students": [student.to_store() for student in students]}


class HttpRosterRepository:
    """Spreadsheet web-app backed roster store.

    Contract: ``GET {base_url}?t=<ms>`` returns a JSON list of classes;
    ``POST {base_url}`` with ``{"sheetId", "students"}`` replaces one class and
    answers ``{"status": "success"}`` when the sheet was written.
    """

    def __init__(self, base_url: str, timeout_ms: int = 10_000):
        self.base_url = str(base_url)
        self.timeout = max(100, int(timeout_ms)) / 1000.0

    def _headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    @count_calls("roster_store.http.load_all.calls")
    def load_all(self) -> List[SubjectClass]:
        params = {"t": int(time.time() * 1000)}  # defeat intermediary caches
        try:
            with timer("roster_store.http.load_all"):
                resp = httpx.get(
                    self.base_url,
                    params=params,
                    headers=self._headers(),
                    timeout=self.timeout,
                    follow_redirects=True,
                )
            if resp.status_code != 200:
                inc_counter("roster_store.http.load_all.bad_status")
                logger.error(
                    "roster_load_bad_status",
                    extra={"structured_data": {"status_code": resp.status_code}},
                )
                return []
            rosters = parse_rosters(resp.json())
        except Exception as exc:  # network errors, timeouts, bad JSON, schema drift
            inc_counter("roster_store.http.load_all.errors")
            logger.error(
                "roster_load_failed",
                extra={"structured_data": {"error": str(exc), "error_type": type(exc).__name__}},
            )
            return []
        inc_counter("roster_store.http.load_all.success")
        logger.info(
            "roster_load_complete",
            extra={"structured_data": {"class_ids": [roster.id for roster in rosters]}},
        )
        return rosters

    @count_calls("roster_store.http.save_roster.calls")
    def save_roster(self, class_id: str, students: Sequence[Student]) -> bool:
        body = json.dumps(_roster_body(class_id, students), ensure_ascii=False)
        try:
            with timer("roster_store.http.save_roster"):
                # text/plain keeps the Apps Script endpoint free of CORS preflight
                resp = httpx.post(
                    self.base_url,
                    content=body.encode("utf-8"),
                    headers={"Content-Type": "text/plain;charset=utf-8", **self._headers()},
                    timeout=self.timeout,
                    follow_redirects=True,
                )
            result = resp.json()
        except Exception as exc:
            inc_counter("roster_store.http.save_roster.errors")
            logger.error(
                "roster_save_failed",
                extra={"structured_data": {"class_id": class_id, "error": str(exc), "error_type": type(exc).__name__}},
            )
            return False
        ok = isinstance(result, dict) and result.get("status") == _SUCCESS_STATUS
        inc_counter("roster_store.http.save_roster.success" if ok else "roster_store.http.save_roster.rejected")
        if not ok:
            logger.warning(
                "roster_save_rejected",
                extra={"structured_data": {"class_id": class_id, "status_code": resp.status_code, "response": result}},
            )
        return ok


_MOCK_FIRST_NAMES = ("สมชาย", "วิชัย", "สุดา", "มานี", "ปิติ", "ชูใจ", "วีระ", "สมศรี", "กานดา", "อาทิตย์")
_MOCK_LAST_NAMES = ("ใจดี", "รักเรียน", "ขยันยิ่ง", "มั่งมี", "ศรีสุข", "เจริญผล", "มั่นคง", "ยอดเยี่ยม")
_MOCK_LAYOUT: tuple[tuple[SubjectId, int, str], ...] = (
    (SubjectId.M1_HISTORY, 20, "661"),
    (SubjectId.M1_SOCIAL, 20, "661"),
    (SubjectId.M5_HISTORY, 15, "665"),
    (SubjectId.M5_SOCIAL, 15, "665"),
    (SubjectId.M6_SOCIAL, 25, "666"),
)


def _mock_status(rng: random.Random) -> SpecialStatus:
    if rng.random() > 0.9:
        return SpecialStatus.ABSENT_EXCUSED
    if rng.random() > 0.95:
        return SpecialStatus.INCOMPLETE
    return SpecialStatus.NORMAL


def _mock_students(count: int, prefix: str, rng: random.Random) -> List[Student]:
    students = []
    for i in range(count):
        students.append(
            Student(
                id=f"{prefix}{i + 1:03d}",
                name=f"{rng.choice(_MOCK_FIRST_NAMES)} {rng.choice(_MOCK_LAST_NAMES)}",
                scores={
                    "collected": [rng.randint(2, 9) for _ in range(COLLECTED_SLOTS)],
                    "midterm": rng.randint(10, 19),
                    "final": rng.randint(10, 19),
                },
                status=_mock_status(rng),
                redeemed_draws=rng.randint(0, 2),
            )
        )
    return students


def generate_mock_rosters(seed: int) -> List[SubjectClass]:
    """Deterministic demo rosters for the five configured classes."""
    rng = random.Random(seed)
    return [
        SubjectClass(id=subject.value, name=SUBJECTS[subject], students=_mock_students(count, prefix, rng))
        for subject, count, prefix in _MOCK_LAYOUT
    ]


class MockRosterRepository:
    """Local JSON file fallback used when no spreadsheet endpoint is configured."""

    def __init__(self, path: str | Path, seed: int = 661):
        self.path = Path(path)
        self.seed = seed
        self._lock = threading.Lock()

    def _write(self, rosters: Sequence[SubjectClass]) -> None:
        payload = [roster.model_dump(mode="json", by_alias=True) for roster in rosters]
        self.path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    def _read(self) -> List[SubjectClass]:
        if not self.path.exists():
            rosters = generate_mock_rosters(self.seed)
            self._write(rosters)
            logger.info("mock_store_seeded", extra={"structured_data": {"path": str(self.path)}})
            return rosters
        return parse_rosters(json.loads(self.path.read_text(encoding="utf-8")))

    @count_calls("roster_store.mock.load_all.calls")
    def load_all(self) -> List[SubjectClass]:
        with self._lock:
            try:
                return self._read()
            except (OSError, ValueError) as exc:
                logger.error(
                    "mock_store_load_failed",
                    extra={"structured_data": {"path": str(self.path), "error": str(exc)}},
                )
                return []

    @count_calls("roster_store.mock.save_roster.calls")
    def save_roster(self, class_id: str, students: Sequence[Student]) -> bool:
        with self._lock:
            try:
                rosters = self._read()
                if not any(roster.id == class_id for roster in rosters):
                    logger.warning("mock_store_unknown_class", extra={"structured_data": {"class_id": class_id}})
                    return False
                updated = [
                    roster.model_copy(update={"students": list(students)}) if roster.id == class_id else roster
                    for roster in rosters
                ]
                self._write(updated)
            except (OSError, ValueError) as exc:
                logger.error(
                    "mock_store_save_failed",
                    extra={"structured_data": {"path": str(self.path), "class_id": class_id, "error": str(exc)}},
                )
                return False
        return True


def find_student_enrollments(repository: RosterRepository, student_id: str) -> List[Enrollment]:
    """Every roster the student appears in; empty when unknown or the store is down."""
    wanted = (student_id or "").strip()
    if not wanted:
        return []
    enrollments = []
    for roster in repository.load_all():
        student = roster.find_student(wanted)
        if student is not None:
            enrollments.append(Enrollment(student=student, subject=roster))
    return enrollments


def build_roster_repository(config: Settings) -> RosterRepository:
    if config.mock_store_active:
        logger.info("roster_store_mock_selected", extra={"structured_data": {"path": config.mock_store_path}})
        return MockRosterRepository(config.mock_store_path, seed=config.mock_store_seed)
    return HttpRosterRepository(str(config.roster_store_url), timeout_ms=config.roster_store_timeout_ms)
