"""
Lifecycle hooks for Questline.

Hooks are named HookFlow variants declared to run before or after a test
group. Example usage:

    from questline.hooks import HookRunner, before, hook_flow

    @hook_flow("SEED_USERS")
    def seed_users(service, outputs, arguments):
        outputs["users"] = list(arguments)

    runner = HookRunner(resolver, storage)
    runner.run_before([before("SEED_USERS", arguments=["admin"])])
"""

from questline.hooks.declarations import (
    HookDeclaration,
    HooksConfig,
    HookTiming,
    after,
    before,
    load_hooks_yaml,
    plan,
)
from questline.hooks.flows import HookFlow, hook_flow
from questline.hooks.runner import HookRunner, RunnerState

__all__ = [
    "HookDeclaration",
    "HookFlow",
    "HookRunner",
    "HookTiming",
    "HooksConfig",
    "RunnerState",
    "after",
    "before",
    "hook_flow",
    "load_hooks_yaml",
    "plan",
]
