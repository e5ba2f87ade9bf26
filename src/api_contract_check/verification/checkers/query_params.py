"""Query parameter consistency check between two descriptions of one operation."""

import logging

from api_contract_check.parser.base import (
    FORM_URLENCODED,
    ActionType,
    Operation,
    Param,
    supports_request_body,
)
from api_contract_check.verification.checkers.base import ActionCheck, registry
from api_contract_check.verification.issue import (
    Issue,
    IssueLocation,
    IssueSet,
    IssueSeverity,
    IssueType,
    add_issue,
)

logger = logging.getLogger(__name__)

QUERY_PARAMETER_MISSING = "Missing Query Parameter."
QUERY_PARAMETER_FOUND_IN_FORM = "Missing Query Parameter but found in Form Parameters"
INCOMPATIBLE_TYPES = "Incompatible data types"
INCOMPATIBLE_VALIDATION = "Incompatible validation parameters"
REQUIRED_PARAM_HIDDEN = "Target requires parameter that is marked not required in reference."

VALIDATION_FIELDS = ("min_length", "max_length", "maximum", "minimum", "pattern")


@registry.register
class QueryParameterChecker(ActionCheck):
    """Checks that the target honors every query parameter the reference declares.

    The scan is driven by the reference: parameters only the target
    declares are never reported. A parameter missing from the target's
    query string is ERROR when the reference requires it and WARNING
    otherwise; the severity ceiling only applies to a target that makes
    an optional parameter mandatory.
    """

    _TYPE = "query_parameters"

    def check(
        self,
        kind: ActionType,
        reference: Operation,
        target: Operation,
        location: IssueLocation,
        max_severity: IssueSeverity,
    ) -> tuple[IssueSet, IssueSet]:
        logger.debug(f"Checking action {kind.value}")
        errors = IssueSet()
        warnings = IssueSet()
        if not reference.query_parameters:
            return warnings, errors

        target_params = target.query_parameters or {}
        for name, ref_param in reference.query_parameters.items():
            logger.debug(f"Checking query parameter {name}")
            target_param = target_params.get(name)
            if target_param is None:
                issue = self._missing_issue(name, ref_param, reference, target, location)
                add_issue(errors, warnings, issue, f"{issue.message}  {name} in {location.value}")
                continue

            if not ref_param.required and target_param.required:
                issue = self._issue(max_severity, IssueType.DIFFERENT, REQUIRED_PARAM_HIDDEN, reference, location, name)
                add_issue(errors, warnings, issue, f"{REQUIRED_PARAM_HIDDEN} {name} in {location.value}")

            if ref_param.param_type is not None and ref_param.param_type != target_param.param_type:
                issue = self._issue(IssueSeverity.WARNING, IssueType.DIFFERENT, INCOMPATIBLE_TYPES, reference, location, name)
                add_issue(errors, warnings, issue, f"{INCOMPATIBLE_TYPES} {name} in {location.value}")

            if _validation_differs(ref_param, target_param):
                issue = self._issue(IssueSeverity.WARNING, IssueType.DIFFERENT, INCOMPATIBLE_VALIDATION, reference, location, name)
                add_issue(errors, warnings, issue, f"{INCOMPATIBLE_VALIDATION} {name} in {location.value}")

        return warnings, errors

    def _missing_issue(
        self,
        name: str,
        ref_param: Param,
        reference: Operation,
        target: Operation,
        location: IssueLocation,
    ) -> Issue:
        # Only the SOURCE direction accepts a parameter relocated to a form body.
        if (
            location is IssueLocation.SOURCE
            and target.form_parameter(FORM_URLENCODED, name) is not None
            and supports_request_body(reference.kind)
        ):
            return self._issue(IssueSeverity.WARNING, IssueType.MISSING, QUERY_PARAMETER_FOUND_IN_FORM, reference, location, name)

        severity = IssueSeverity.ERROR if ref_param.required else IssueSeverity.WARNING
        return self._issue(severity, IssueType.MISSING, QUERY_PARAMETER_MISSING, reference, location, name)

    @staticmethod
    def _issue(
        severity: IssueSeverity,
        issue_type: IssueType,
        message: str,
        reference: Operation,
        location: IssueLocation,
        name: str,
    ) -> Issue:
        return Issue(
            severity=severity,
            location=location,
            issue_type=issue_type,
            message=message,
            resource=reference.resource,
            action=reference.key,
            parameter=name,
        )


def _validation_differs(reference: Param, target: Param) -> bool:
    """True if any constraint the reference sets is not matched by the target."""
    for field in VALIDATION_FIELDS:
        expected = getattr(reference, field)
        if expected is not None and expected != getattr(target, field):
            return True
    return False
