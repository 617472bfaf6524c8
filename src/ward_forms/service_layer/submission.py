"""
Submission pipeline for the record forms.

A FormSession is the whole state of one form view: its draft, where the
current submission attempt stands, the visible status message, field errors
and, for views that show one, the local list of saved rows. Sessions are
immutable; every step returns a new session.

    Idle -> Validating -> Saving -> Succeeded
                     \\         \\-> Failed
                      \\-> Failed

Succeeded and Failed go back to Validating on the next submit. There is no
retry and no deduplication: submitting the same draft twice stores two rows.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from ward_forms.adapters.sheets_client import AbstractSheetsClient, SheetsClientError
from ward_forms.domain.records import Draft
from ward_forms.domain.validation import validate_draft

logger = logging.getLogger(__name__)


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SAVING = "saving"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


ALLOWED_TRANSITIONS = {
    SubmissionState.IDLE: {SubmissionState.VALIDATING},
    SubmissionState.VALIDATING: {SubmissionState.SAVING, SubmissionState.FAILED},
    SubmissionState.SAVING: {SubmissionState.SUCCEEDED, SubmissionState.FAILED},
    SubmissionState.SUCCEEDED: {SubmissionState.VALIDATING},
    SubmissionState.FAILED: {SubmissionState.VALIDATING},
}

SEVERITIES = {
    SubmissionState.IDLE: "info",
    SubmissionState.VALIDATING: "info",
    SubmissionState.SAVING: "info",
    SubmissionState.SUCCEEDED: "success",
    SubmissionState.FAILED: "error",
}


class InvalidTransitionError(Exception):
    """Raised when a session is asked to move to a state it cannot reach."""

    def __init__(self, current: SubmissionState, target: SubmissionState):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move from {current.value} to {target.value}")


@dataclass(frozen=True)
class FormSession:
    draft: Draft
    state: SubmissionState = SubmissionState.IDLE
    message: str = ""
    errors: Mapping[str, str] = field(default_factory=dict)
    # None for views that keep no local list
    records: Optional[Tuple[Dict[str, Any], ...]] = None

    @classmethod
    def open(cls, draft_type: Type[Draft], keep_list: bool = False) -> "FormSession":
        return cls(draft=draft_type.empty(), records=() if keep_list else None)

    @property
    def keeps_list(self) -> bool:
        return self.records is not None

    @property
    def severity(self) -> str:
        return SEVERITIES[self.state]


def transition(session: FormSession, target: SubmissionState, **changes) -> FormSession:
    if target not in ALLOWED_TRANSITIONS[session.state]:
        raise InvalidTransitionError(session.state, target)
    logger.debug(f"{type(session.draft).__name__}: {session.state.value} -> {target.value}")
    return replace(session, state=target, **changes)


def edit(session: FormSession, field_name: str, value: Any) -> FormSession:
    """Change one draft field. Not allowed while a save is in flight."""
    if session.state is SubmissionState.SAVING:
        raise InvalidTransitionError(session.state, session.state)
    return replace(session, draft=session.draft.with_value(field_name, value))


def validate(session: FormSession, now: Optional[datetime] = None) -> FormSession:
    """Validate the draft; ends in Saving when it is submittable, Failed otherwise."""
    session = transition(session, SubmissionState.VALIDATING, message="Validating...", errors={})
    errors = validate_draft(session.draft, now)
    if errors:
        logger.info(f"Draft rejected, invalid fields: {', '.join(errors)}")
        return transition(
            session,
            SubmissionState.FAILED,
            message=f"Please correct the following fields: {', '.join(errors)}",
            errors=errors,
        )
    return transition(session, SubmissionState.SAVING, message="Saving...")


def complete(session: FormSession, error: Optional[str] = None) -> FormSession:
    """Record the outcome of the save. Success resets the draft to its empty default."""
    if error is not None:
        return transition(session, SubmissionState.FAILED, message=f"Error: {error}")
    return transition(
        session,
        SubmissionState.SUCCEEDED,
        message=session.draft.success_message,
        draft=type(session.draft).empty(),
    )


def refresh_list(session: FormSession, client: AbstractSheetsClient) -> FormSession:
    """Re-read the whole sheet into the session's local list."""
    if not session.keeps_list:
        return session
    label = session.draft.list_label
    try:
        rows = client.read_sheet(session.draft.sheet)
    except SheetsClientError as e:
        logger.error(f"Error fetching {label}: {e}")
        prefix = f"{session.message} " if session.message else ""
        return replace(session, message=f"{prefix}Error fetching {label}: {e}")
    return replace(session, records=tuple(rows))


def submit(session: FormSession, client: AbstractSheetsClient, now: Optional[datetime] = None) -> FormSession:
    """
    Run one submission attempt: validate, save, then reset or report.

    Every failure ends in a Failed session with a visible message; nothing
    is raised to the caller except an illegal transition.
    """
    session = validate(session, now)
    if session.state is SubmissionState.FAILED:
        return session

    draft = session.draft
    logger.info(f"Submitting {type(draft).__name__} to {draft.sheet.value}")
    try:
        client.append_record(draft.sheet, draft.to_payload())
    except SheetsClientError as e:
        logger.error(f"Error saving {type(draft).__name__}: {e}")
        return complete(session, str(e))

    session = complete(session)
    return refresh_list(session, client)
