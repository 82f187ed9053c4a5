"""Well-known storage namespaces and keys used by the runtime."""

import enum as _enum


class StorageKeys(_enum.Enum):
    """
    Namespaces and keys the core itself writes to.

    Domain adapters define their own key enums; these are the ones the
    orchestration layer owns.
    """

    ARGUMENTS = "arguments"
    """Values materialized for the test body."""

    PRE_ARGUMENTS = "pre_arguments"
    """Values materialized for pre-test journeys."""

    STATIC_DATA = "static_data"
    """Mapping of static test data, read through static_test_data()."""

    HOOKS = "hooks"
    """Output map produced by the last hook run."""

    CLEANUPS = "cleanups"
    """Names of cleanup actions scheduled for the current test."""
