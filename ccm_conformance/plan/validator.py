"""Run plan validator.

Validates parsed RunPlan objects against the available providers and suites.
"""

from ..providers import PROVIDERS
from ..suite.builtin import SUITE_FACTORIES, build_suites
from .schema import VALID_OUTPUT_FORMATS, RunPlan, ValidationError, ValidationResult


def validate_plan(plan: RunPlan) -> ValidationResult:
    """Validate a parsed RunPlan.

    Checks:
    - Provider and output format are supported
    - Suite names exist and timeout is positive
    - Test selections match at least one known test

    Args:
        plan: Parsed RunPlan to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []

    _validate_settings(plan, errors)
    _validate_suites(plan, errors, warnings)

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _validate_settings(plan: RunPlan, errors: list[ValidationError]) -> None:
    if plan.provider not in PROVIDERS:
        errors.append(ValidationError(
            path="provider",
            message=f"Unsupported provider '{plan.provider}'. Must be one of: {', '.join(sorted(PROVIDERS))}",
        ))

    if plan.output not in VALID_OUTPUT_FORMATS:
        errors.append(ValidationError(
            path="output",
            message=f"Invalid output format '{plan.output}'. Must be one of: {', '.join(sorted(VALID_OUTPUT_FORMATS))}",
        ))

    if plan.timeout <= 0:
        errors.append(ValidationError(
            path="timeout",
            message=f"Timeout must be positive, got {plan.timeout:g}.",
        ))

    for name in ("cleanup", "mock_external", "verbose"):
        if not isinstance(getattr(plan, name), bool):
            errors.append(ValidationError(
                path=name,
                message=f"'{name}' must be true or false.",
            ))

    if not plan.cluster:
        errors.append(ValidationError(
            path="cluster",
            message="'cluster' is required and must not be empty.",
        ))


def _validate_suites(
    plan: RunPlan,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    if not plan.suites:
        errors.append(ValidationError(
            path="suites",
            message="No suites selected.",
        ))
        return

    known_tests: set[str] = set()
    for i, name in enumerate(plan.suites):
        if name != "all" and name not in SUITE_FACTORIES:
            errors.append(ValidationError(
                path=f"suites[{i}]",
                message=f"Unknown suite '{name}'. Must be 'all' or one of: {', '.join(SUITE_FACTORIES)}",
            ))
            continue
        for suite in build_suites(name):
            known_tests.update(suite.test_names())

    for field_name in ("tests", "skip"):
        for i, test_name in enumerate(getattr(plan, field_name)):
            if test_name not in known_tests:
                warnings.append(ValidationError(
                    path=f"{field_name}[{i}]",
                    message=f"Test '{test_name}' does not match any selected test.",
                    severity="warning",
                ))

    overlap = set(plan.tests) & set(plan.skip)
    if overlap:
        warnings.append(ValidationError(
            path="skip",
            message=f"Tests both selected and skipped (skip wins): {', '.join(sorted(overlap))}",
            severity="warning",
        ))
