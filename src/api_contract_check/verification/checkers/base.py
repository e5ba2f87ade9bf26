"""Base class and registry for per-operation contract checks."""

import abc

from api_contract_check.parser.base import ActionType, Operation
from api_contract_check.verification.issue import IssueLocation, IssueSet, IssueSeverity


class ActionCheck(abc.ABC):
    """A check run once per matched (reference, target) operation pair."""

    @classmethod
    def type_name(cls) -> str:
        return getattr(cls, "_TYPE", cls.__name__.lower())

    @abc.abstractmethod
    def check(
        self,
        kind: ActionType,
        reference: Operation,
        target: Operation,
        location: IssueLocation,
        max_severity: IssueSeverity,
    ) -> tuple[IssueSet, IssueSet]:
        """Compare two operations. Returns (warnings, errors)."""


class CheckRegistry:
    """Registry of available operation checks."""

    def __init__(self) -> None:
        self._by_type: dict[str, type[ActionCheck]] = {}

    def register(self, check_cls: type[ActionCheck]) -> type[ActionCheck]:
        self._by_type[check_cls.type_name()] = check_cls
        return check_cls

    def get(self, check_type: str) -> type[ActionCheck] | None:
        return self._by_type.get(check_type.strip().lower())

    def names(self) -> list[str]:
        return sorted(self._by_type)


registry = CheckRegistry()
