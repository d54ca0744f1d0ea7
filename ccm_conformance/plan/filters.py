"""Test selection filters.

Filtering never drops tests from a suite: tests left out of a run are marked
skipped with a reason so they still show up in the results.
"""

from typing import Iterable

from ..suite.schema import TestSuite

NOT_SELECTED_REASON = "not selected by --tests"
SKIP_REQUESTED_REASON = "skipped by --skip"


def apply_filters(
    suites: Iterable[TestSuite],
    only: Iterable[str] = (),
    skip: Iterable[str] = (),
) -> list[TestSuite]:
    """Return copies of ``suites`` with unselected tests marked skipped.

    Args:
        suites: Suites to filter.
        only: If non-empty, run only tests with these names.
        skip: Names of tests to skip. Takes precedence over ``only``.
    """
    only_set = set(only)
    skip_set = set(skip)

    filtered = []
    for suite in suites:
        tests = []
        for test in suite.tests:
            if test.skip:
                tests.append(test)
            elif test.name in skip_set:
                tests.append(test.skipped(SKIP_REQUESTED_REASON))
            elif only_set and test.name not in only_set:
                tests.append(test.skipped(NOT_SELECTED_REASON))
            else:
                tests.append(test)
        filtered.append(suite.with_tests(tests))

    return filtered
