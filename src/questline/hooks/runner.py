"""
Lifecycle hook runner.

Runs the BEFORE hooks of a test group ahead of its tests and the AFTER hooks
once they are done. Each phase run:

1. keeps the declarations of that phase, stable-sorted by ``order``;
2. resolves every hook through discovery before executing any of them, so
   configuration mistakes surface unwrapped and nothing has run yet;
3. executes the flows in order with a fresh, shared ``outputs`` dict;
4. stores ``outputs`` under StorageKeys.HOOKS once every flow succeeded.

The first failing flow aborts the phase with HookExecutionError.
"""

from __future__ import annotations

import enum as _enum
import logging as _logging
import typing as _typing

import questline.discovery.resolver as resolver_mod
import questline.errors as errors
import questline.events as events_mod
import questline.hooks.declarations as declarations
import questline.hooks.flows as flows
import questline.storage as storage_mod

_logger = _logging.getLogger(__name__)


class RunnerState(_enum.Enum):
    """Lifecycle of a HookRunner."""

    IDLE = "idle"
    """Nothing has run yet."""

    RUNNING_BEFORE = "running_before"
    """BEFORE hooks are executing."""

    READY = "ready"
    """BEFORE phase finished (successfully or not)."""

    RUNNING_AFTER = "running_after"
    """AFTER hooks are executing."""

    DONE = "done"
    """AFTER phase finished."""


class HookRunner:
    """Executes declared hooks of one test group."""

    def __init__(
        self,
        resolver: resolver_mod.Resolver,
        storage: storage_mod.Storage,
        service: _typing.Any = None,
        *,
        contract: _typing.Any = flows.HookFlow,
        events: events_mod.EventBus | None = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            resolver: Resolver used to find hook flows.
            storage: Storage receiving the hook outputs.
            service: Object passed to every flow as its first argument.
            contract: Contract hook flows are registered under.
            events: Bus receiving HOOK_* events.
        """
        self._resolver = resolver
        self._storage = storage
        self._service = service
        self._contract = contract
        self._events = events if events is not None else events_mod.EventBus()
        self._state = RunnerState.IDLE

    @property
    def state(self) -> RunnerState:
        """Current lifecycle state."""
        return self._state

    @property
    def storage(self) -> storage_mod.Storage:
        """Storage the outputs are written to."""
        return self._storage

    def run_before(
        self,
        hooks: _typing.Iterable[declarations.HookDeclaration],
    ) -> dict[str, _typing.Any]:
        """
        Run the BEFORE hooks.

        Returns:
            The outputs written by the hooks.

        Raises:
            VariantNotFoundError, AmbiguousVariantError, InvalidVariantNameError:
                A hook could not be resolved; no hook has run.
            HookExecutionError: A hook raised; later hooks did not run.
            RuntimeError: Called while hooks are already running.
        """
        return self._run(
            hooks,
            declarations.HookTiming.BEFORE,
            RunnerState.RUNNING_BEFORE,
            RunnerState.READY,
        )

    def run_after(
        self,
        hooks: _typing.Iterable[declarations.HookDeclaration],
    ) -> dict[str, _typing.Any]:
        """
        Run the AFTER hooks.

        Allowed whatever the outcome of the BEFORE phase or the tests.
        Raises the same errors as ``run_before``.
        """
        return self._run(
            hooks,
            declarations.HookTiming.AFTER,
            RunnerState.RUNNING_AFTER,
            RunnerState.DONE,
        )

    def _run(
        self,
        hooks: _typing.Iterable[declarations.HookDeclaration],
        timing: declarations.HookTiming,
        running: RunnerState,
        finished: RunnerState,
    ) -> dict[str, _typing.Any]:
        if self._state in (RunnerState.RUNNING_BEFORE, RunnerState.RUNNING_AFTER):
            raise RuntimeError(
                f"Hook runner is already running ({self._state.value}); "
                "hook flows must not call back into it"
            )

        ordered = declarations.plan(hooks, timing)
        resolved = [(d, self._resolver.resolve(self._contract, d.name)) for d in ordered]

        outputs: dict[str, _typing.Any] = {}
        self._state = running
        try:
            for declaration, flow in resolved:
                self._execute(declaration, flow, outputs)
        finally:
            self._state = finished

        self._storage.put(storage_mod.StorageKeys.HOOKS, outputs)
        _logger.debug("Ran %d %s hook(s)", len(resolved), timing.value)
        return outputs

    def _execute(
        self,
        declaration: declarations.HookDeclaration,
        flow: _typing.Callable[..., _typing.Any],
        outputs: dict[str, _typing.Any],
    ) -> None:
        name = declaration.name
        arguments = list(declaration.arguments)
        self._events.emit(
            events_mod.EventKind.HOOK_STARTED,
            name,
            timing=declaration.timing.value,
            arguments=arguments,
        )
        _logger.info("Running %s hook: %s", declaration.timing.value, name)
        try:
            flow(self._service, outputs, arguments)
        except Exception as e:
            _logger.error("Hook %s failed: %s", name, e)
            self._events.emit(
                events_mod.EventKind.HOOK_FAILED,
                name,
                timing=declaration.timing.value,
                error=e,
            )
            raise errors.HookExecutionError(name, e) from e
        self._events.emit(
            events_mod.EventKind.HOOK_FINISHED,
            name,
            timing=declaration.timing.value,
        )
