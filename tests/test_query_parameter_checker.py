from api_contract_check.parser.base import FORM_URLENCODED, ActionType, MimeBody, Operation, Param
from api_contract_check.verification.checkers.query_params import (
    INCOMPATIBLE_TYPES,
    INCOMPATIBLE_VALIDATION,
    QUERY_PARAMETER_FOUND_IN_FORM,
    QUERY_PARAMETER_MISSING,
    REQUIRED_PARAM_HIDDEN,
    QueryParameterChecker,
)
from api_contract_check.verification.issue import IssueLocation, IssueSeverity, IssueType


def _op(kind: ActionType, *params: Param, form: list[Param] | None = None, path: str = "/pets") -> Operation:
    body = None
    if form is not None:
        body = {
            FORM_URLENCODED: MimeBody(
                media_type=FORM_URLENCODED,
                form_parameters={p.name: p for p in form},
            )
        }
    return Operation(
        kind=kind,
        resource=path,
        query_parameters={p.name: p for p in params} or None,
        body=body,
    )


def _check(reference, target, location=IssueLocation.TARGET, max_severity=IssueSeverity.ERROR):
    return QueryParameterChecker().check(reference.kind, reference, target, location, max_severity)


class TestNoReferenceParameters:
    def test_absent_reference_parameters_yield_nothing(self):
        reference = _op(ActionType.GET)
        target = _op(ActionType.GET, Param(name="extra", required=True))
        warnings, errors = _check(reference, target)
        assert len(warnings) == 0
        assert len(errors) == 0

    def test_empty_reference_parameters_yield_nothing(self):
        reference = Operation(kind=ActionType.GET, resource="/pets", query_parameters={})
        target = _op(ActionType.GET)
        warnings, errors = _check(reference, target, IssueLocation.SOURCE)
        assert len(warnings) == 0
        assert len(errors) == 0

    def test_target_only_parameters_are_ignored(self):
        reference = _op(ActionType.GET, Param(name="id", param_type="string"))
        target = _op(ActionType.GET, Param(name="id", param_type="string"), Param(name="debug", required=True))
        warnings, errors = _check(reference, target)
        assert len(warnings) == 0
        assert len(errors) == 0


class TestMissingParameter:
    def test_missing_required_is_error(self):
        reference = _op(ActionType.GET, Param(name="id", required=True, param_type="string"))
        target = _op(ActionType.GET)
        warnings, errors = _check(reference, target)
        assert len(warnings) == 0
        [issue] = errors.to_list()
        assert issue.severity == IssueSeverity.ERROR
        assert issue.issue_type == IssueType.MISSING
        assert issue.message == QUERY_PARAMETER_MISSING
        assert issue.parameter == "id"
        assert issue.location == IssueLocation.TARGET
        assert issue.resource == "/pets"
        assert issue.action == "GET /pets"

    def test_missing_optional_is_warning(self):
        reference = _op(ActionType.GET, Param(name="limit", param_type="integer"))
        target = _op(ActionType.GET, Param(name="other"))
        warnings, errors = _check(reference, target)
        assert len(errors) == 0
        [issue] = warnings.to_list()
        assert issue.severity == IssueSeverity.WARNING
        assert issue.message == QUERY_PARAMETER_MISSING

    def test_missing_ignores_severity_ceiling(self):
        reference = _op(ActionType.GET, Param(name="id", required=True))
        target = _op(ActionType.GET)
        warnings, errors = _check(reference, target, max_severity=IssueSeverity.WARNING)
        assert len(warnings) == 0
        assert len(errors) == 1

    def test_missing_is_logged_with_location(self, caplog):
        reference = _op(ActionType.GET, Param(name="id", required=True))
        target = _op(ActionType.GET)
        with caplog.at_level("DEBUG"):
            _check(reference, target, IssueLocation.SOURCE)
        assert f"{QUERY_PARAMETER_MISSING}  id in SOURCE" in caplog.text


class TestFormFallback:
    def test_found_in_form_replaces_missing_required(self):
        reference = _op(ActionType.POST, Param(name="name", required=True, param_type="string"))
        target = _op(ActionType.POST, form=[Param(name="name", location="form", required=True)])
        warnings, errors = _check(reference, target, IssueLocation.SOURCE)
        assert len(errors) == 0
        [issue] = warnings.to_list()
        assert issue.severity == IssueSeverity.WARNING
        assert issue.issue_type == IssueType.MISSING
        assert issue.message == QUERY_PARAMETER_FOUND_IN_FORM
        assert issue.parameter == "name"

    def test_not_applied_in_target_direction(self):
        reference = _op(ActionType.POST, Param(name="name", required=True))
        target = _op(ActionType.POST, form=[Param(name="name", location="form")])
        warnings, errors = _check(reference, target, IssueLocation.TARGET)
        [issue] = errors.to_list()
        assert issue.message == QUERY_PARAMETER_MISSING
        assert len(warnings) == 0

    def test_not_applied_when_kind_has_no_body(self):
        reference = _op(ActionType.GET, Param(name="name", required=True))
        target = _op(ActionType.GET, form=[Param(name="name", location="form")])
        warnings, errors = _check(reference, target, IssueLocation.SOURCE)
        [issue] = errors.to_list()
        assert issue.message == QUERY_PARAMETER_MISSING

    def test_not_applied_when_form_lacks_name(self):
        reference = _op(ActionType.PUT, Param(name="name"))
        target = _op(ActionType.PUT, form=[Param(name="other", location="form")])
        warnings, errors = _check(reference, target, IssueLocation.SOURCE)
        [issue] = warnings.to_list()
        assert issue.message == QUERY_PARAMETER_MISSING

    def test_other_media_types_are_not_consulted(self):
        reference = _op(ActionType.POST, Param(name="name", required=True))
        target = Operation(
            kind=ActionType.POST,
            resource="/pets",
            body={"application/json": MimeBody(media_type="application/json")},
        )
        warnings, errors = _check(reference, target, IssueLocation.SOURCE)
        [issue] = errors.to_list()
        assert issue.message == QUERY_PARAMETER_MISSING


class TestPresentOnBoth:
    def test_required_hidden_and_type_mismatch_are_independent(self):
        reference = _op(ActionType.GET, Param(name="page", required=False, param_type="number"))
        target = _op(ActionType.GET, Param(name="page", required=True, param_type="string"))
        warnings, errors = _check(reference, target, max_severity=IssueSeverity.ERROR)
        [hidden] = errors.to_list()
        assert hidden.message == REQUIRED_PARAM_HIDDEN
        assert hidden.issue_type == IssueType.DIFFERENT
        [types] = warnings.to_list()
        assert types.message == INCOMPATIBLE_TYPES
        assert types.severity == IssueSeverity.WARNING

    def test_required_hidden_uses_severity_ceiling(self):
        reference = _op(ActionType.GET, Param(name="page"))
        target = _op(ActionType.GET, Param(name="page", required=True))
        warnings, errors = _check(reference, target, max_severity=IssueSeverity.WARNING)
        assert len(errors) == 0
        [issue] = warnings.to_list()
        assert issue.message == REQUIRED_PARAM_HIDDEN
        assert issue.severity == IssueSeverity.WARNING

    def test_required_in_reference_and_optional_in_target_is_fine(self):
        reference = _op(ActionType.GET, Param(name="page", required=True))
        target = _op(ActionType.GET, Param(name="page"))
        warnings, errors = _check(reference, target)
        assert len(warnings) == 0
        assert len(errors) == 0

    def test_untyped_reference_never_flags_type(self):
        reference = _op(ActionType.GET, Param(name="page"))
        target = _op(ActionType.GET, Param(name="page", param_type="integer"))
        warnings, errors = _check(reference, target)
        assert len(warnings) == 0

    def test_validation_mismatch_collapses_to_one_issue(self):
        reference = _op(ActionType.GET, Param(name="q", min_length=1, max_length=50))
        target = _op(ActionType.GET, Param(name="q", min_length=1, max_length=20))
        warnings, errors = _check(reference, target)
        [issue] = warnings.to_list()
        assert issue.message == INCOMPATIBLE_VALIDATION
        assert issue.parameter == "q"
        assert len(errors) == 0

    def test_several_validation_differences_still_one_issue(self):
        reference = _op(ActionType.GET, Param(name="n", minimum=0, maximum=10, pattern="^[0-9]+$"))
        target = _op(ActionType.GET, Param(name="n", minimum=1, maximum=5))
        warnings, _ = _check(reference, target)
        assert [i.message for i in warnings] == [INCOMPATIBLE_VALIDATION]

    def test_unconstrained_reference_pattern_never_flags(self):
        reference = _op(ActionType.GET, Param(name="q", param_type="string"))
        target = _op(ActionType.GET, Param(name="q", param_type="string", pattern="^a+$", max_length=3))
        warnings, errors = _check(reference, target)
        assert len(warnings) == 0
        assert len(errors) == 0

    def test_target_dropping_a_constraint_flags(self):
        reference = _op(ActionType.GET, Param(name="q", pattern="^a+$"))
        target = _op(ActionType.GET, Param(name="q"))
        warnings, _ = _check(reference, target)
        assert [i.message for i in warnings] == [INCOMPATIBLE_VALIDATION]


class TestResultProperties:
    def test_errors_and_warnings_are_partitioned_by_severity(self):
        reference = _op(
            ActionType.GET,
            Param(name="a", required=True),
            Param(name="b"),
            Param(name="c", param_type="string"),
            Param(name="d"),
        )
        target = _op(ActionType.GET, Param(name="c", param_type="integer"), Param(name="d", required=True))
        warnings, errors = _check(reference, target)
        assert all(i.severity == IssueSeverity.ERROR for i in errors)
        assert all(i.severity == IssueSeverity.WARNING for i in warnings)
        assert [i.parameter for i in warnings] == ["b", "c"]
        assert [i.parameter for i in errors] == ["a", "d"]

    def test_repeated_checks_are_set_equal(self):
        reference = _op(ActionType.GET, Param(name="id", required=True), Param(name="q", max_length=5))
        target = _op(ActionType.GET, Param(name="q", max_length=9))
        first = _check(reference, target)
        second = _check(reference, target)
        assert first[0] == second[0]
        assert first[1] == second[1]

    def test_inputs_are_not_modified(self):
        reference = _op(ActionType.POST, Param(name="name", required=True))
        target = _op(ActionType.POST, form=[Param(name="name", location="form")])
        before = (reference.model_dump(), target.model_dump())
        _check(reference, target, IssueLocation.SOURCE)
        assert (reference.model_dump(), target.model_dump()) == before
