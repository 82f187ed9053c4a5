"""
Shared constants for Questline.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

DEFAULT_NAMESPACE = "default"
"""Name of the sub-store returned by Storage.sub() without a namespace."""

ENV_PREFIX = "QUESTLINE_"
"""Prefix for all environment variables read by Settings."""

CONFIG_DIR_NAME = ".questline"
"""Project-local configuration directory name."""

CONFIG_FILE_NAME = "config.yaml"
"""Configuration file name inside user and project config directories."""

HOOKS_FILE_NAME = "hooks.yaml"
"""Default hook declaration file name inside the project config directory."""

RING_USED_TEMPLATE = "The quest has used the ring: '{}'"
"""Log line emitted whenever a ring is switched to."""

RETRIEVAL_LOG_TEMPLATE = "Fetching data from storage by key: '{}' and type: '{}'"
"""Log line emitted by the retrieval helpers."""
