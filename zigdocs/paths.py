"""Centralized path management for zigdocs.

This module handles all path detection and management. Uses ZIG_DOCS_HOME
environment variable with ~/.zig-docs default.
"""

import os
from pathlib import Path


def get_zigdocs_home() -> Path:
    """Get the zigdocs home directory.

    Priority:
    1. ZIG_DOCS_HOME env var (explicit override)
    2. ~/.zig-docs (default)

    """
    if env_home := os.environ.get("ZIG_DOCS_HOME"):
        return Path(env_home)
    return Path.home() / ".zig-docs"


def get_version_cache_dir(version: str) -> Path:
    """Get the artifact cache directory for one Zig version.

    Holds main.wasm, sources.tar, builtin-functions.json and metadata.json.
    """
    return get_zigdocs_home() / "cache" / version
