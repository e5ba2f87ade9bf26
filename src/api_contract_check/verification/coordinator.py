"""Runs operation checks across two parsed contracts and collects the issues.

The contract is the published API description; the implementation is the
description derived from the running code. Each matched operation is
checked in the forward direction (contract as reference, issues located
in SOURCE) and, optionally, in reverse (implementation as reference,
issues located in TARGET).
"""

import logging
from collections.abc import Iterable

from api_contract_check.config import CheckConfig
from api_contract_check.parser.base import Operation
from api_contract_check.verification.checkers.base import ActionCheck, registry
from api_contract_check.verification.checkers import query_params  # registers QueryParameterChecker
from api_contract_check.verification.issue import IssueLocation, IssueSet, IssueSeverity

logger = logging.getLogger(__name__)


def match_operations(
    reference_ops: Iterable[Operation], target_ops: Iterable[Operation]
) -> list[tuple[Operation, Operation]]:
    """Pair operations with the same kind and resource, in reference order."""
    targets = {(op.kind, op.resource): op for op in target_ops}
    pairs = []
    for op in reference_ops:
        match = targets.get((op.kind, op.resource))
        if match is None:
            logger.debug(f"No counterpart for {op.key}")
            continue
        pairs.append((op, match))
    return pairs


def build_checkers(names: Iterable[str]) -> list[ActionCheck]:
    """Instantiate registered checkers by name."""
    checkers = []
    for name in names:
        check_cls = registry.get(name)
        if check_cls is None:
            raise ValueError(f"Unknown checker: {name} (available: {', '.join(registry.names())})")
        checkers.append(check_cls())
    return checkers


class VerificationReport:
    """Warnings and errors collected over a whole contract comparison."""

    def __init__(self, warnings: IssueSet | None = None, errors: IssueSet | None = None):
        self.warnings = warnings if warnings is not None else IssueSet()
        self.errors = errors if errors is not None else IssueSet()

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def summary(self) -> dict:
        return {
            "total": len(self.errors) + len(self.warnings),
            "errors": len(self.errors),
            "warnings": len(self.warnings),
        }

    def exit_code(self, fail_on: str = "error") -> int:
        if fail_on == "never":
            return 0
        if fail_on == "warning" and (self.errors or self.warnings):
            return 2
        return 2 if self.has_errors else 0

    def to_dict(self) -> dict:
        return {
            "summary": self.summary(),
            "errors": [issue.model_dump(mode="json") for issue in self.errors],
            "warnings": [issue.model_dump(mode="json") for issue in self.warnings],
        }


class ContractCoordinator:
    """Matches operations between two contracts and runs every checker on each pair."""

    def __init__(self, checkers: list[ActionCheck] | None = None, config: CheckConfig | None = None):
        self.config = config or CheckConfig()
        if checkers is None:
            checkers = build_checkers(self.config.checkers)
        self.checkers = checkers

    def verify(self, contract_ops: list[Operation], implementation_ops: list[Operation]) -> VerificationReport:
        report = VerificationReport()
        self._run(report, contract_ops, implementation_ops, IssueLocation.SOURCE, self.config.max_severity)
        if self.config.check_reverse:
            self._run(report, implementation_ops, contract_ops, IssueLocation.TARGET, self.config.reverse_max_severity)
        logger.info(f"Verification finished: {report.summary()}")
        return report

    def _run(
        self,
        report: VerificationReport,
        reference_ops: list[Operation],
        target_ops: list[Operation],
        location: IssueLocation,
        max_severity: IssueSeverity,
    ) -> None:
        for reference, target in match_operations(reference_ops, target_ops):
            for checker in self.checkers:
                warnings, errors = checker.check(reference.kind, reference, target, location, max_severity)
                report.warnings.update(warnings)
                report.errors.update(errors)
