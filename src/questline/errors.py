"""
Error taxonomy for Questline.

Every error raised by the core derives from QuestlineError so hosts can
catch the whole family at once. Discovery errors also derive from the
builtin exception a caller would naturally expect (LookupError or
ValueError).
"""

from __future__ import annotations

import typing as _typing


def _contract_name(contract: _typing.Any) -> str:
    return getattr(contract, "__qualname__", None) or repr(contract)


class QuestlineError(Exception):
    """Base class for all Questline errors."""

    pass


# =============================================================================
# Discovery
# =============================================================================


class DiscoveryError(QuestlineError):
    """Base class for variant discovery failures."""

    def __init__(self, contract: _typing.Any, name: str, message: str) -> None:
        self.contract = contract
        self.name = name
        super().__init__(message)


class VariantNotFoundError(DiscoveryError, LookupError):
    """No implementation of the contract with the requested name was found."""

    def __init__(
        self,
        contract: _typing.Any,
        name: str,
        scopes: _typing.Sequence[str],
    ) -> None:
        self.scopes = tuple(scopes)
        super().__init__(
            contract,
            name,
            f"No {_contract_name(contract)} variant named '{name}' "
            f"found in scopes: {', '.join(self.scopes) or '(none)'}",
        )


class AmbiguousVariantError(DiscoveryError, LookupError):
    """Several implementations match even after the first-scope fallback."""

    def __init__(
        self,
        contract: _typing.Any,
        name: str,
        scope: str,
        candidates: _typing.Sequence[str] = (),
    ) -> None:
        self.scope = scope
        self.candidates = tuple(candidates)
        detail = f" (candidates: {', '.join(self.candidates)})" if self.candidates else ""
        super().__init__(
            contract,
            name,
            f"Multiple {_contract_name(contract)} variants named '{name}' "
            f"found in scope '{scope}'{detail}",
        )


class InvalidVariantNameError(DiscoveryError, ValueError):
    """The requested name is not a known variant identifier at all."""

    def __init__(self, contract: _typing.Any, name: str, reason: str) -> None:
        self.reason = reason
        super().__init__(
            contract,
            name,
            f"Invalid {_contract_name(contract)} variant name '{name}': {reason}",
        )


class DuplicateVariantError(QuestlineError, ValueError):
    """A different implementation is already registered under the same identity."""

    pass


class ScopeImportError(QuestlineError, ImportError):
    """A configured scope could not be imported while scanning."""

    def __init__(self, scope: str, cause: BaseException) -> None:
        self.scope = scope
        super().__init__(f"Failed to import scope '{scope}': {cause}")


# =============================================================================
# Storage
# =============================================================================


class StorageTypeError(QuestlineError, TypeError):
    """A stored value cannot be read as the requested type."""

    pass


# =============================================================================
# Hooks
# =============================================================================


class HookExecutionError(QuestlineError):
    """A resolved hook flow raised while executing."""

    def __init__(self, hook_name: str, cause: BaseException) -> None:
        self.hook_name = hook_name
        super().__init__(f"Error executing hook: {hook_name}: {cause}")


# =============================================================================
# Retry
# =============================================================================


class RetryTimeoutError(QuestlineError, TimeoutError):
    """Polling exceeded its maximum wait without the condition succeeding."""

    def __init__(
        self,
        max_wait: float,
        attempts: int,
        last_value: _typing.Any = None,
        last_error: BaseException | None = None,
    ) -> None:
        self.max_wait = max_wait
        self.attempts = attempts
        self.last_value = last_value
        self.last_error = last_error
        if last_error is not None:
            last = f"last error: {type(last_error).__name__}: {last_error}"
        else:
            last = f"last value: {last_value!r}"
        super().__init__(
            f"Condition not met within {max_wait:g}s after {attempts} attempt(s), {last}"
        )


# =============================================================================
# Quest composition
# =============================================================================


class CompositionError(QuestlineError):
    """Decoration was asked to wrap an absent or invalid execution context."""

    pass


class RingNotInitializedError(QuestlineError, LookupError):
    """The requested ring was never registered with the quest."""

    def __init__(self, ring_type: type) -> None:
        self.ring_type = ring_type
        super().__init__(f"Ring not initialized: {ring_type.__module__}.{ring_type.__qualname__}")
