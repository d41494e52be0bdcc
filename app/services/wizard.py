# app/services/wizard.py

"""
Registration wizard controller.

The wizard walks a candidate through seven steps. Steps 1-6 are "completed"
when their backing rows exist (step 6: when the latest payment row is
completed, or the category is fee-exempt); step 7 is the review/submit page.
Experience is optional: once education is saved, step 4 no longer holds
back the steps after it.

Completion is never stored. It is derived from a ``RegistrationSnapshot``
loaded from the database, so the locked/reachable split is always computed
from the store rather than from whatever the client remembers.
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional
from uuid import UUID

from loguru import logger

from app.core.constants import (
    EXEMPT_CATEGORIES,
    FIRST_STEP,
    PERSONAL_INFO_STEP,
    OTHER_DETAILS_STEP,
    EDUCATION_STEP,
    EXPERIENCE_STEP,
    DOCUMENTS_STEP,
    PAYMENT_STEP,
    REVIEW_STEP,
    REGISTRATION_STEPS,
    OPTIONAL_STEPS,
)
from app.core.events import PaymentCompleted, PaymentCompletionBus, Subscription
from app.core.exceptions import (
    ApplicationLocked,
    GatingViolation,
    PaymentRequired,
    PortalError,
    SubmissionError,
)
from app.models.application import Application
from app.models.document import Document
from app.models.education import EducationalQualification
from app.models.enums import ApplicationStatus, PaymentStatus
from app.models.experience import ExperienceInfo
from app.models.other_details import OtherDetails
from app.models.payment import Payment
from app.models.personal_info import PersonalInfo


# ------------------------------------------------------------
# LOADED DATA
# ------------------------------------------------------------
@dataclass
class RegistrationSnapshot:
    """Everything the wizard needs, as loaded for one candidate."""
    application: Optional[Application] = None
    personal_info: Optional[PersonalInfo] = None
    other_details: Optional[OtherDetails] = None
    education: list[EducationalQualification] = field(default_factory=list)
    experience: list[ExperienceInfo] = field(default_factory=list)
    documents: list[Document] = field(default_factory=list)
    latest_payment: Optional[Payment] = None

    @property
    def category(self) -> Optional[str]:
        if self.personal_info is None:
            return None
        return self.personal_info.category

    @property
    def is_exempt(self) -> bool:
        return is_exempt_category(self.category)

    @property
    def payment_recorded(self) -> bool:
        """The latest payment row (by creation time) is completed."""
        return self.latest_payment is not None and _status_value(
            self.latest_payment.payment_status
        ) == PaymentStatus.Completed.value

    @property
    def payment_completed(self) -> bool:
        return self.payment_recorded or self.is_exempt

    @property
    def is_submitted(self) -> bool:
        return (
            self.application is not None
            and _status_value(self.application.status) == ApplicationStatus.Submitted.value
        )


def _status_value(status) -> str:
    return status.value if hasattr(status, "value") else str(status)


def is_exempt_category(category: Optional[str]) -> bool:
    return bool(category) and category.strip().lower() in EXEMPT_CATEGORIES


# ------------------------------------------------------------
# COMPLETION DERIVATION
# ------------------------------------------------------------
STEP_COMPLETION_RULES: dict[int, Callable[[RegistrationSnapshot], bool]] = {
    PERSONAL_INFO_STEP: lambda s: s.personal_info is not None,
    OTHER_DETAILS_STEP: lambda s: s.other_details is not None,
    EDUCATION_STEP: lambda s: len(s.education) > 0,
    EXPERIENCE_STEP: lambda s: len(s.experience) > 0,
    DOCUMENTS_STEP: lambda s: len(s.documents) > 0,
    PAYMENT_STEP: lambda s: s.payment_completed,
}


def derive_completed_steps(snapshot: RegistrationSnapshot) -> set[int]:
    return {step for step, rule in STEP_COMPLETION_RULES.items() if rule(snapshot)}


def max_allowed_step(completed_steps: set[int]) -> int:
    """Furthest step a candidate may open: one past the furthest completed step."""
    return max(completed_steps | {FIRST_STEP}) + 1


def gating_steps(completed_steps: set[int]) -> set[int]:
    """
    Steps that count as passed when deciding what is unlocked. An optional
    step is passed once the step before it is completed (freshers skip
    Experience).
    """
    passed = set(completed_steps)
    for step, prerequisite in OPTIONAL_STEPS.items():
        if prerequisite in passed:
            passed.add(step)
    return passed


def derive_current_step(completed_steps: set[int], payment_completed: bool) -> int:
    max_completed = max(completed_steps | {0})
    if max_completed >= PAYMENT_STEP and payment_completed:
        return REVIEW_STEP
    return min(max_completed + 1, PAYMENT_STEP)


# ------------------------------------------------------------
# CONTROLLER
# ------------------------------------------------------------
SnapshotLoader = Callable[[], Awaitable[RegistrationSnapshot]]
StepSaver = Callable[[int], Awaitable[None]]
Submitter = Callable[[], Awaitable[Application]]


class RegistrationWizard:
    """
    View-state for one candidate's wizard.

    ``current_step`` is re-derived whenever loaded data changes; the
    navigation methods then move it within the gating rule. Failed
    operations raise a ``PortalError`` and leave state untouched.
    """

    def __init__(
        self,
        snapshot: RegistrationSnapshot,
        loader: Optional[SnapshotLoader] = None,
        save_step: Optional[StepSaver] = None,
    ):
        self._loader = loader
        self._save_step = save_step
        self._subscription: Optional[Subscription] = None
        self.payment_completed = False
        self.current_step = FIRST_STEP
        self.apply_snapshot(snapshot)

    # ---------------- derived state ----------------
    def apply_snapshot(self, snapshot: RegistrationSnapshot) -> None:
        self.snapshot = snapshot
        self.completed_steps = derive_completed_steps(snapshot)
        # a completion notification stays sticky until the next reload shows it
        self.payment_completed = self.payment_completed or snapshot.payment_completed
        self.current_step = derive_current_step(self.completed_steps, self.payment_completed)

    @property
    def application_id(self) -> Optional[UUID]:
        if self.snapshot.application is None:
            return None
        return self.snapshot.application.id

    @property
    def max_allowed_step(self) -> int:
        return max_allowed_step(gating_steps(self.completed_steps))

    def is_step_completed(self, step: int) -> bool:
        if step == PAYMENT_STEP:
            return self.payment_completed
        return step in self.completed_steps

    def can_open(self, step: int) -> bool:
        return FIRST_STEP <= step <= self.max_allowed_step

    async def reload(self, keep_position: bool = False) -> None:
        if self._loader is None:
            return
        step = self.current_step
        self.apply_snapshot(await self._loader())
        if keep_position:
            self.current_step = step

    # ---------------- navigation ----------------
    def go_to_step(self, step: int) -> int:
        if not self.can_open(step):
            raise GatingViolation("Please complete the previous steps before proceeding")
        self.current_step = step
        return self.current_step

    async def next(self) -> int:
        if self.current_step < PAYMENT_STEP:
            try:
                if self._save_step is not None:
                    await self._save_step(self.current_step)
            except PortalError:
                raise
            except Exception as e:
                logger.error(f"Error saving step {self.current_step}: {e}")
                raise PortalError("Please try again", title="Error Saving Data")
            if self._save_step is not None:
                await self.reload(keep_position=True)
            self.current_step += 1
            return self.current_step

        if self.current_step == PAYMENT_STEP:
            if not self.payment_completed:
                raise PaymentRequired("Please complete the payment to proceed")
            self.current_step = REVIEW_STEP

        return self.current_step

    def previous(self) -> int:
        if self.current_step > FIRST_STEP:
            self.current_step -= 1
        return self.current_step

    async def submit(self, submitter: Submitter) -> Application:
        if self.current_step != REVIEW_STEP:
            raise GatingViolation("Review your application before submitting")
        if self.snapshot.application is None:
            raise SubmissionError("Failed to submit application")
        if self.snapshot.is_submitted:
            raise ApplicationLocked("This application has already been submitted")

        try:
            application = await submitter()
        except PortalError:
            raise
        except Exception as e:
            logger.exception(f"Submission failed for application {self.application_id}: {e}")
            raise SubmissionError("Failed to submit application")

        self.snapshot.application = application
        return application

    # ---------------- payment notifications ----------------
    def attach(self, bus: PaymentCompletionBus) -> None:
        if self._subscription is None:
            self._subscription = bus.subscribe(self._on_payment_completed)

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def _on_payment_completed(self, event: PaymentCompleted) -> None:
        if self.application_id is not None and event.application_id != self.application_id:
            return
        self.payment_completed = True
        await self.reload()
        # the event itself proves a completed payment row exists
        self.completed_steps.add(PAYMENT_STEP)
        self.current_step = derive_current_step(self.completed_steps, self.payment_completed)

    # ---------------- presentation ----------------
    def state(self) -> dict:
        application = self.snapshot.application
        return {
            "application_id": application.id if application else None,
            "application_status": _status_value(application.status) if application else None,
            "current_step": self.current_step,
            "completed_steps": sorted(self.completed_steps),
            "payment_completed": self.payment_completed,
            "max_allowed_step": self.max_allowed_step,
            "steps": [
                {
                    **step,
                    "completed": self.is_step_completed(step["id"]),
                    "current": step["id"] == self.current_step,
                    "locked": not self.can_open(step["id"]),
                }
                for step in REGISTRATION_STEPS
            ],
        }
