"""
Variant discovery for Questline.

Variants are named implementations of a contract, registered in a catalog
together with the module (scope) they live in. A Resolver finds the single
implementation for a (contract, name) pair across an ordered scope list.

Example usage:
    from questline.discovery import Resolver, scan, variant
    from questline.hooks import HookFlow

    @variant(HookFlow, "SEED_USERS")
    def seed_users(service, outputs, arguments):
        outputs["users"] = arguments

    scan(["my_project.hooks"])
    flow = Resolver(scopes=["my_project"]).resolve(HookFlow, "SEED_USERS")
"""

from questline.discovery.catalog import Catalog, VariantEntry, default_catalog, variant
from questline.discovery.resolver import Resolver
from questline.discovery.scanner import scan, scan_scope

__all__ = [
    "Catalog",
    "Resolver",
    "VariantEntry",
    "default_catalog",
    "scan",
    "scan_scope",
    "variant",
]
