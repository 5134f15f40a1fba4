import pytest

from leadreports.services.outcomes import OutcomeCategory, classify_status


@pytest.mark.parametrize(
    "status,expected",
    [
        ("new", OutcomeCategory.pending),
        ("pending", OutcomeCategory.pending),
        ("rejected", OutcomeCategory.rejected),
        ("contacted", OutcomeCategory.in_progress),
        ("qualified", OutcomeCategory.in_progress),
        ("converted", OutcomeCategory.completed),
        ("contract_completed", OutcomeCategory.contract_completed),
        ("needs_followup", OutcomeCategory.needs_followup),
    ],
)
def test_known_statuses(status, expected):
    assert classify_status(status) is expected


@pytest.mark.parametrize("status", [None, "", "Converted", "NEW", "lost", " new", "vip"])
def test_everything_else_is_other(status):
    assert classify_status(status) is OutcomeCategory.other


def test_category_order_matches_report_columns():
    assert [c.value for c in OutcomeCategory] == [
        "pending",
        "rejected",
        "inProgress",
        "completed",
        "contractCompleted",
        "needsFollowup",
        "other",
    ]
