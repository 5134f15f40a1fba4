from collections.abc import Iterable
from dataclasses import dataclass

from leadreports.services.records import StaffMember

UNASSIGNED = "Unassigned"


@dataclass(frozen=True)
class StaffRef:
    staff_key: str
    display_name: str
    department: str


class StaffDirectory:
    """Read-only id -> staff lookup built from one roster snapshot.

    Departments come from the roster as it is now, not as it was when the lead
    was created. Ids that are missing from the roster (unassigned leads, staff
    who have left) resolve to the unassigned sentinel instead of failing.
    """

    def __init__(self, roster: Iterable[StaffMember], unassigned_label: str = UNASSIGNED):
        self.unassigned_label = unassigned_label
        self.unassigned = StaffRef(unassigned_label, unassigned_label, unassigned_label)
        self._members: dict[int, StaffMember] = {}
        self._refs: dict[int, StaffRef] = {}
        for member in roster:
            self._members[member.id] = member
            self._refs[member.id] = StaffRef(
                staff_key=str(member.id),
                display_name=member.display_name,
                department=member.department or unassigned_label,
            )

    def __len__(self) -> int:
        return len(self._members)

    def resolve(self, assignee_id: int | None) -> StaffRef:
        if assignee_id is None:
            return self.unassigned
        return self._refs.get(assignee_id, self.unassigned)

    def departments(self) -> list[str]:
        return sorted({m.department for m in self._members.values() if m.department})

    def members(self, department: str | None = None) -> list[StaffMember]:
        members = list(self._members.values())
        if department:
            members = [m for m in members if self._refs[m.id].department == department]
        return sorted(members, key=lambda m: (m.display_name, m.id))
