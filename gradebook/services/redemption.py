"""Lucky-draw ticket redemption against the whole-roster store.

A redemption is one optimistic transaction:

    IDLE --begin--> REDEEMING --confirm--> CONFIRMED
                              --roll_back--> ROLLED_BACK

``begin`` applies ``redeemed + 1`` to the portal immediately and builds the
full roster the store needs. ``confirm`` adopts that roster as the new local
snapshot. ``roll_back`` restores the override that was in place before
``begin`` (not a decrement), so the portal returns to its last-known-good
count exactly.

Right before ``begin`` the coordinator reloads the class from the store, so
the saved roster carries teacher edits made after login. It drives one
transaction per call and never retries; a user has to trigger a new
redemption by hand.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from gradebook.core.errors import InvalidTransitionError, NoTicketsAvailableError, RedemptionInProgressError
from gradebook.core.logging import get_logger
from gradebook.core.metrics import inc_counter
from gradebook.i18n.th_messages import RedemptionMessages
from gradebook.schemas.roster import Student
from gradebook.services.portal import StudentPortal
from gradebook.services.roster_store import Enrollment, RosterRepository

__all__ = [
    "RedemptionState",
    "RedemptionPreview",
    "RedemptionOutcome",
    "RedemptionTransaction",
    "RedemptionCoordinator",
]

logger = get_logger("services.redemption", component="services")


class RedemptionState(str, Enum):
    IDLE = "idle"
    REDEEMING = "redeeming"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True, slots=True)
class RedemptionPreview:
    """What the student is asked to confirm."""

    student_id: str
    class_id: str
    class_name: str
    redeemed: int
    available: int
    prompt: str = RedemptionMessages.CONFIRM_PROMPT


@dataclass(frozen=True, slots=True)
class RedemptionOutcome:
    state: RedemptionState
    success: bool
    class_id: str
    redeemed: int
    available: int
    message: str


ConfirmCallback = Callable[[RedemptionPreview], bool]
Notifier = Callable[[RedemptionOutcome], None]


class RedemptionTransaction:
    """Explicit state machine for one optimistic redemption on one class."""

    def __init__(self, portal: StudentPortal, class_id: str):
        self.portal = portal
        self.class_id = class_id
        self.state = RedemptionState.IDLE
        self.redeemed_before: Optional[int] = None
        self.redeemed_after: Optional[int] = None
        self.updated_roster: Optional[List[Student]] = None
        self._previous_override: Optional[int] = None
        self._updated_student: Optional[Student] = None

    def _require(self, expected: RedemptionState, action: str) -> None:
        if self.state is not expected:
            raise InvalidTransitionError(
                detail={"action": action, "state": self.state.value, "expected": expected.value}
            )

    def begin(self) -> List[Student]:
        """Apply the optimistic increment and return the full roster to save."""
        self._require(RedemptionState.IDLE, "begin")
        enrollment = self.portal.enrollment(self.class_id)
        self._previous_override = self.portal.override_for(self.class_id)
        self.redeemed_before = self.portal.current_redeemed(self.class_id)
        self.redeemed_after = self.redeemed_before + 1

        self.portal.set_override(self.class_id, self.redeemed_after)
        self._updated_student = enrollment.student.model_copy(update={"redeemed_draws": self.redeemed_after})
        self.updated_roster = enrollment.subject.with_student(self._updated_student).students
        self.state = RedemptionState.REDEEMING
        return self.updated_roster

    def confirm(self) -> None:
        if self.state is RedemptionState.CONFIRMED:
            # a repeated success signal for the same attempt changes nothing
            return
        self._require(RedemptionState.REDEEMING, "confirm")
        subject = self.portal.enrollment(self.class_id).subject
        self.portal.commit(Enrollment(student=self._updated_student, subject=subject.with_student(self._updated_student)))
        self.state = RedemptionState.CONFIRMED

    def roll_back(self) -> None:
        self._require(RedemptionState.REDEEMING, "roll_back")
        self.portal.set_override(self.class_id, self._previous_override)
        self.state = RedemptionState.ROLLED_BACK


class RedemptionCoordinator:
    """Runs a single redemption end to end: guard, confirm, save, reconcile, notify."""

    def __init__(self, repository: RosterRepository, notifier: Optional[Notifier] = None):
        self.repository = repository
        self.notifier = notifier

    def preview(self, portal: StudentPortal, class_id: str) -> RedemptionPreview:
        card = portal.report(class_id)
        return RedemptionPreview(
            student_id=portal.student_id,
            class_id=class_id,
            class_name=card.class_name,
            redeemed=card.tickets.redeemed,
            available=card.tickets.available,
        )

    def _outcome(self, portal: StudentPortal, class_id: str, state: RedemptionState, message: str) -> RedemptionOutcome:
        card = portal.report(class_id)
        return RedemptionOutcome(
            state=state,
            success=state is RedemptionState.CONFIRMED,
            class_id=class_id,
            redeemed=card.tickets.redeemed,
            available=card.tickets.available,
            message=message,
        )

    def redeem(self, portal: StudentPortal, class_id: str, confirm: ConfirmCallback) -> RedemptionOutcome:
        """Redeem one ticket for ``portal``'s student in ``class_id``.

        Raises ``NoTicketsAvailableError`` or ``RedemptionInProgressError``
        before anything is changed. Store failures and store exceptions are
        absorbed into a rolled-back outcome.
        """
        if portal.report(class_id).tickets.available <= 0:
            raise NoTicketsAvailableError()
        if not portal.try_acquire(class_id):
            raise RedemptionInProgressError()
        try:
            preview = self.preview(portal, class_id)
            if preview.available <= 0:
                raise NoTicketsAvailableError()
            if not confirm(preview):
                return self._outcome(portal, class_id, RedemptionState.IDLE, RedemptionMessages.CANCELLED)
            return self._run(portal, class_id)
        finally:
            portal.release(class_id)

    def _sync_snapshot(self, portal: StudentPortal, class_id: str) -> None:
        """Re-read the class from the store so the save carries edits made since login."""
        for roster in self.repository.load_all():
            if roster.id != class_id:
                continue
            student = roster.find_student(portal.student_id)
            if student is not None:
                portal.commit(Enrollment(student=student, subject=roster))
                return
            break
        logger.warning(
            "redemption_snapshot_stale",
            extra={"structured_data": {"student_id": portal.student_id, "class_id": class_id}},
        )

    def _run(self, portal: StudentPortal, class_id: str) -> RedemptionOutcome:
        self._sync_snapshot(portal, class_id)
        if portal.report(class_id).tickets.available <= 0:
            raise NoTicketsAvailableError()
        txn = RedemptionTransaction(portal, class_id)
        roster = txn.begin()
        inc_counter("redemption.started")
        log_fields = {
            "student_id": portal.student_id,
            "class_id": class_id,
            "redeemed_before": txn.redeemed_before,
            "redeemed_after": txn.redeemed_after,
        }
        logger.info("redemption_started", extra={"structured_data": log_fields})

        try:
            saved = self.repository.save_roster(class_id, roster)
        except Exception as exc:  # implementations may still raise
            txn.roll_back()
            message = RedemptionMessages.CONNECTION_ERROR
            logger.exception("redemption_save_raised", extra={"structured_data": {**log_fields, "error": str(exc)}})
        else:
            if saved:
                txn.confirm()
                message = RedemptionMessages.SUCCESS
            else:
                txn.roll_back()
                message = RedemptionMessages.SAVE_REJECTED

        inc_counter(f"redemption.{txn.state.value}")
        logger.info(f"redemption_{txn.state.value}", extra={"structured_data": log_fields})
        outcome = self._outcome(portal, class_id, txn.state, message)
        if self.notifier is not None:
            self.notifier(outcome)
        return outcome
