"""Issue model and the ordered issue collection checkers return."""

import logging
from collections.abc import Iterable, Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class IssueSeverity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"


class IssueLocation(str, Enum):
    """Which side is under evaluation when the issue is raised."""

    SOURCE = "SOURCE"
    TARGET = "TARGET"


class IssueType(str, Enum):
    MISSING = "MISSING"
    DIFFERENT = "DIFFERENT"


class Issue(BaseModel):
    """One discrepancy between a reference and a target operation.

    Issues compare and hash by value, so two structurally identical
    issues collapse to one inside an IssueSet.
    """

    model_config = ConfigDict(frozen=True)

    severity: IssueSeverity
    location: IssueLocation
    issue_type: IssueType
    message: str
    resource: str
    action: str
    parameter: str | None = None

    def render(self) -> str:
        subject = f"{self.action} {self.parameter}" if self.parameter else self.action
        return (
            f"[{self.severity.value}] {self.location.value} {self.issue_type.value} "
            f"{subject}: {self.message}"
        )


class IssueSet:
    """Duplicate-free collection of issues that iterates in insertion order."""

    def __init__(self, issues: Iterable[Issue] = ()):
        self._items: dict[Issue, None] = {}
        for issue in issues:
            self.add(issue)

    def add(self, issue: Issue) -> bool:
        """Add an issue. Returns False if an equal issue was already present."""
        if issue in self._items:
            return False
        self._items[issue] = None
        return True

    def update(self, issues: Iterable[Issue]) -> None:
        for issue in issues:
            self.add(issue)

    def to_list(self) -> list[Issue]:
        return list(self._items)

    def __iter__(self) -> Iterator[Issue]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, issue: object) -> bool:
        return issue in self._items

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IssueSet):
            return NotImplemented
        return self._items.keys() == other._items.keys()

    def __repr__(self) -> str:
        return f"IssueSet({self.to_list()!r})"


def add_issue(errors: IssueSet, warnings: IssueSet, issue: Issue, description: str) -> None:
    """Log an issue's description and file it under errors or warnings by severity."""
    if issue.severity is IssueSeverity.ERROR:
        logger.error(description)
        errors.add(issue)
    else:
        logger.warning(description)
        warnings.add(issue)
