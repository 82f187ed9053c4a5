"""
Test-group orchestration.

A QuestGroup ties the components together for one group of tests:

    group = QuestGroup(settings, hooks=[before("SEED_USERS"), after("DROP_USERS")])
    with group:
        outcome = group.run(test_body, rings=[ApiRing], crafts=["ADMIN_USER"],
                            cleanups=["DELETE_USERS"])

``start()`` scans the configured scopes and runs the BEFORE hooks. Each
``run()`` builds a fresh quest, prepares its data, calls the test body and
always runs the scheduled cleanups. ``finish()`` runs the AFTER hooks.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import questline.config as config
import questline.data as data
import questline.discovery as discovery
import questline.errors as errors
import questline.events as events_mod
import questline.hooks as hooks_mod
import questline.quest as quest_pkg
import questline.quest.holder as holder
import questline.storage as storage_mod

_logger = _logging.getLogger(__name__)

Craft = _typing.Union[str, data.JourneyData]


def _crafts(crafts: _typing.Iterable[Craft]) -> list[data.JourneyData]:
    return [c if isinstance(c, data.JourneyData) else data.JourneyData(c) for c in crafts]


@_dataclasses.dataclass
class QuestOutcome:
    """
    Result of one ``QuestGroup.run()`` whose body returned normally.

    Attributes:
        quest: The quest the body ran with.
        crafted: Values (or Lates) passed to the body.
        cleanup_failures: Cleanup actions that raised.
    """

    quest: quest_pkg.Quest
    crafted: list[_typing.Any] = _dataclasses.field(default_factory=list)
    cleanup_failures: list[data.CleanupFailure] = _dataclasses.field(default_factory=list)

    @property
    def clean(self) -> bool:
        """Whether every cleanup action succeeded."""
        return not self.cleanup_failures

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to JSON-serializable dict."""
        return {
            "crafted": [repr(v) for v in self.crafted],
            "cleanup_failures": [f.to_dict() for f in self.cleanup_failures],
        }


class QuestGroup:
    """Runs the tests of one group between its BEFORE and AFTER hooks."""

    def __init__(
        self,
        settings: config.Settings | None = None,
        catalog: discovery.Catalog | None = None,
        hooks: _typing.Iterable[hooks_mod.HookDeclaration] = (),
        service: _typing.Any = None,
        *,
        decorators: quest_pkg.DecoratorsFactory | None = None,
    ) -> None:
        """
        Initialize the group.

        Args:
            settings: Configuration; loaded from the environment by default.
            catalog: Variant catalog; the process-wide one by default.
            hooks: Hook declarations of the group.
            service: Object passed to hook flows.
            decorators: Factory used to build rings.
        """
        self._settings = settings if settings is not None else config.Settings()
        self._resolver = discovery.Resolver(catalog, self._settings.scopes)
        self._hooks = list(hooks)
        self._events = events_mod.EventBus()
        self._storage = storage_mod.Storage(default_namespace=self._settings.default_namespace)
        self._hook_runner = hooks_mod.HookRunner(
            self._resolver, self._storage, service, events=self._events
        )
        self._decorators = decorators if decorators is not None else quest_pkg.DecoratorsFactory()
        self._finished = False

    @classmethod
    def from_settings(
        cls,
        settings: config.Settings | None = None,
        *,
        catalog: discovery.Catalog | None = None,
        service: _typing.Any = None,
    ) -> QuestGroup:
        """
        Create a group whose hooks come from the configured hooks file.

        A missing hooks file means no hooks.
        """
        settings = settings if settings is not None else config.Settings()
        path: _pathlib.Path = settings.get_hooks_path()
        hooks: list[hooks_mod.HookDeclaration] = []
        if path.exists():
            hooks = hooks_mod.load_hooks_yaml(path).hooks
        return cls(settings, catalog, hooks, service)

    @property
    def settings(self) -> config.Settings:
        return self._settings

    @property
    def resolver(self) -> discovery.Resolver:
        return self._resolver

    @property
    def events(self) -> events_mod.EventBus:
        """Bus receiving every event of the group."""
        return self._events

    @property
    def storage(self) -> storage_mod.Storage:
        """Group storage holding the BEFORE hook outputs."""
        return self._storage

    @property
    def decorators(self) -> quest_pkg.DecoratorsFactory:
        return self._decorators

    @property
    def hooks(self) -> list[hooks_mod.HookDeclaration]:
        return list(self._hooks)

    def start(self) -> dict[str, _typing.Any]:
        """
        Scan scopes (when configured to) and run the BEFORE hooks.

        Returns:
            The BEFORE hook outputs.
        """
        if self._settings.scan_scopes and self._settings.scopes:
            discovery.scan(self._settings.scopes)
        return self._hook_runner.run_before(self._hooks)

    def run(
        self,
        body: _typing.Callable[..., _typing.Any],
        *,
        rings: _typing.Iterable[type] = (),
        journeys: _typing.Iterable[data.JourneyDeclaration] = (),
        crafts: _typing.Iterable[Craft] = (),
        cleanups: _typing.Iterable[str] = (),
        static_data: str | None = None,
    ) -> QuestOutcome:
        """
        Run one test body.

        The body is called as ``body(quest, *crafted)``. If it has not
        completed the quest itself, the quest is completed afterwards, which
        asserts the collected soft validations. Cleanups run whether or not
        the body raised; the body's error is re-raised after them.

        Args:
            body: The test.
            rings: Ring classes to register on the quest.
            journeys: Preconditions to run before the body.
            crafts: Data passed to the body; a JourneyData with ``late`` set
                passes a Late.
            cleanups: Cleanup actions to run after the body.
            static_data: Static data provider whose mapping is stored under
                StorageKeys.STATIC_DATA before journeys and the body run.

        Returns:
            The outcome, when the body returned normally.
        """
        quest = quest_pkg.Quest(
            events=self._events,
            default_namespace=self._settings.default_namespace,
        )
        elevated = quest_pkg.SuperQuest(quest)
        self._decorators.decorate(quest, *rings)

        hook_outputs = self._storage.get(storage_mod.StorageKeys.HOOKS, dict)
        quest.storage.put(storage_mod.StorageKeys.HOOKS, dict(hook_outputs))

        registry = data.CleanupRegistry(self._resolver, elevated)
        for name in cleanups:
            registry.register(name)

        if static_data is not None:
            data.load_static_data(self._resolver, quest.storage, static_data)

        materializer = data.Materializer(self._resolver, quest.storage)
        holder.set_current(elevated)
        try:
            data.JourneyRunner(self._resolver, materializer).run(elevated, journeys)
            crafted = [materializer.materialize(c.name, late=c.late) for c in _crafts(crafts)]
            body(quest, *crafted)
            if holder.current() is elevated:
                quest.complete()
        finally:
            failures = registry.run()
            holder.clear()

        if failures:
            _logger.warning("%d cleanup action(s) failed", len(failures))
        return QuestOutcome(quest, crafted, failures)

    def finish(self) -> dict[str, _typing.Any]:
        """
        Run the AFTER hooks.

        Runs whatever happened in ``start()`` or the tests; a second call
        does nothing.

        Returns:
            The AFTER hook outputs.
        """
        if self._finished:
            return {}
        self._finished = True
        return self._hook_runner.run_after(self._hooks)

    def _finish_after_failure(self) -> None:
        """Run the AFTER hooks while another error is propagating; theirs is only logged."""
        try:
            self.finish()
        except errors.QuestlineError as e:
            _logger.error("AFTER hooks failed while handling an earlier error: %s", e)

    def __enter__(self) -> QuestGroup:
        try:
            self.start()
        except Exception:
            self._finish_after_failure()
            raise
        return self

    def __exit__(self, exc_type: object, exc: BaseException | None, tb: object) -> None:
        if exc is None:
            self.finish()
        else:
            self._finish_after_failure()
