from __future__ import annotations

import threading
from typing import Dict, List, Optional, Sequence

from gradebook.core.errors import ClassNotFoundError, RedemptionInProgressError, StudentNotFoundError
from gradebook.core.logging import get_logger
from gradebook.i18n.th_messages import AuthMessages, RosterMessages
from gradebook.services.report_cards import ReportCard, build_report_card
from gradebook.services.roster_store import Enrollment, RosterRepository, find_student_enrollments

__all__ = ["StudentPortal", "PortalRegistry", "portal_registry"]

logger = get_logger("services.portal", component="services")


class StudentPortal:
    """Per-student view state: loaded enrollments plus optimistic redeemed counts.

    ``redeemed_overrides`` maps class id to a locally applied redeemed count
    that has not been reconciled with the store yet. Reports always read the
    override first, so an in-flight redemption is visible immediately.
    """

    def __init__(self, student_id: str, enrollments: Sequence[Enrollment]):
        self.student_id = student_id
        self._enrollments: Dict[str, Enrollment] = {e.class_id: e for e in enrollments}
        self.redeemed_overrides: Dict[str, int] = {}
        self._busy: set[str] = set()
        self._lock = threading.Lock()

    @property
    def enrollments(self) -> List[Enrollment]:
        return list(self._enrollments.values())

    @property
    def name(self) -> str:
        for enrollment in self._enrollments.values():
            return enrollment.student.name
        return ""

    def enrollment(self, class_id: str) -> Enrollment:
        try:
            return self._enrollments[class_id]
        except KeyError:
            raise ClassNotFoundError(RosterMessages.STUDENT_NOT_ENROLLED.format(class_id=class_id)) from None

    def override_for(self, class_id: str) -> Optional[int]:
        return self.redeemed_overrides.get(class_id)

    def set_override(self, class_id: str, value: Optional[int]) -> None:
        if value is None:
            self.redeemed_overrides.pop(class_id, None)
        else:
            self.redeemed_overrides[class_id] = value

    def current_redeemed(self, class_id: str) -> int:
        override = self.override_for(class_id)
        if override is not None:
            return override
        return self.enrollment(class_id).student.redeemed_draws

    def commit(self, enrollment: Enrollment) -> None:
        """Adopt a store-confirmed snapshot and drop any override for its class."""
        self._enrollments[enrollment.class_id] = enrollment
        self.redeemed_overrides.pop(enrollment.class_id, None)

    def report(self, class_id: str) -> ReportCard:
        enrollment = self.enrollment(class_id)
        return build_report_card(enrollment.student, enrollment.subject, self.current_redeemed(class_id))

    def reports(self) -> List[ReportCard]:
        return [self.report(class_id) for class_id in self._enrollments]

    # --- single-flight guard ---
    def try_acquire(self, class_id: str) -> bool:
        with self._lock:
            if class_id in self._busy:
                return False
            self._busy.add(class_id)
            return True

    def release(self, class_id: str) -> None:
        with self._lock:
            self._busy.discard(class_id)

    def is_busy(self, class_id: Optional[str] = None) -> bool:
        with self._lock:
            return bool(self._busy) if class_id is None else class_id in self._busy

    def reload(self, enrollments: Sequence[Enrollment]) -> None:
        if self.is_busy():
            raise RedemptionInProgressError()
        self._enrollments = {e.class_id: e for e in enrollments}
        self.redeemed_overrides.clear()


class PortalRegistry:
    """In-process map of logged-in student id to portal."""

    def __init__(self) -> None:
        self._portals: Dict[str, StudentPortal] = {}
        self._lock = threading.Lock()

    def _load(self, repository: RosterRepository, student_id: str) -> List[Enrollment]:
        enrollments = find_student_enrollments(repository, student_id)
        if not enrollments:
            logger.info("student_lookup_empty", extra={"structured_data": {"student_id": student_id}})
            raise StudentNotFoundError(AuthMessages.STUDENT_NOT_FOUND)
        return enrollments

    def open(self, repository: RosterRepository, student_id: str) -> StudentPortal:
        portal = StudentPortal(student_id, self._load(repository, student_id))
        with self._lock:
            self._portals[student_id] = portal
        return portal

    def get_or_open(self, repository: RosterRepository, student_id: str) -> StudentPortal:
        with self._lock:
            portal = self._portals.get(student_id)
        return portal if portal is not None else self.open(repository, student_id)

    def refresh(self, repository: RosterRepository, student_id: str) -> StudentPortal:
        with self._lock:
            portal = self._portals.get(student_id)
        if portal is None:
            return self.open(repository, student_id)
        portal.reload(self._load(repository, student_id))
        return portal

    def close(self, student_id: str) -> None:
        with self._lock:
            self._portals.pop(student_id, None)

    def clear(self) -> None:
        with self._lock:
            self._portals.clear()


portal_registry = PortalRegistry()
