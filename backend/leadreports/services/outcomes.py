import enum
import logging

logger = logging.getLogger(__name__)


class OutcomeCategory(str, enum.Enum):
    pending = "pending"
    rejected = "rejected"
    in_progress = "inProgress"
    completed = "completed"
    contract_completed = "contractCompleted"
    needs_followup = "needsFollowup"
    other = "other"


# Raw status values are matched exactly; "Converted" is not "converted".
STATUS_OUTCOMES: dict[str, OutcomeCategory] = {
    "new": OutcomeCategory.pending,
    "pending": OutcomeCategory.pending,
    "rejected": OutcomeCategory.rejected,
    "contacted": OutcomeCategory.in_progress,
    "qualified": OutcomeCategory.in_progress,
    "converted": OutcomeCategory.completed,
    "contract_completed": OutcomeCategory.contract_completed,
    "needs_followup": OutcomeCategory.needs_followup,
}

# Categories that count towards the conversion rate.
COMPLETED_OUTCOMES = frozenset({OutcomeCategory.completed, OutcomeCategory.contract_completed})


def classify_status(status: str | None) -> OutcomeCategory:
    """Map a lead status onto the reporting taxonomy.

    Defined for every input. Statuses outside the table, including empty or
    missing ones, land in ``other`` so the row is still counted.
    """
    outcome = STATUS_OUTCOMES.get(status) if status else None
    if outcome is None:
        if status:
            logger.debug("Unmapped lead status %r counted as other", status)
        return OutcomeCategory.other
    return outcome
