"""Documentation artifact cache.

Per Zig version, the cache directory (see paths.get_version_cache_dir) holds:

- main.wasm                the std documentation engine
- sources.tar              std sources fed to the engine
- builtin-functions.json   builtins scraped from the language reference
- metadata.json            {"lastUpdate": <ms since epoch>, "version": "<version>"}

Missing files are always fetched. Present files are refreshed according to the
update policy.
"""

import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path

import httpx
from pydantic import TypeAdapter, ValidationError

from zigdocs.builtins.extractor import extract_builtin_functions
from zigdocs.paths import get_version_cache_dir
from zigdocs.types import BrokenInvariant, BuiltinFunction, TransientError, UpdatePolicy

logger = logging.getLogger(__name__)

DEFAULT_DOCS_URL = "https://ziglang.org/documentation"
DAY_MS = 24 * 60 * 60 * 1000

_builtin_list = TypeAdapter(list[BuiltinFunction])


@dataclass(frozen=True)
class DocsArtifacts:
    """Paths of the cached artifacts for one Zig version."""

    directory: Path

    @property
    def wasm_path(self) -> Path:
        return self.directory / "main.wasm"

    @property
    def sources_path(self) -> Path:
        return self.directory / "sources.tar"

    @property
    def builtins_path(self) -> Path:
        return self.directory / "builtin-functions.json"

    @property
    def metadata_path(self) -> Path:
        return self.directory / "metadata.json"


def should_update(policy: UpdatePolicy, metadata_path: Path, now: float | None = None) -> bool:
    """Whether cached artifacts are due for a refresh.

    - startup: always
    - daily: metadata missing, unreadable, or lastUpdate at least a day old
    - manual: never (missing files are still fetched by ensure_docs)
    """
    if policy is UpdatePolicy.STARTUP:
        return True
    if policy is UpdatePolicy.MANUAL:
        return False

    now_ms = (time.time() if now is None else now) * 1000
    try:
        metadata = json.loads(metadata_path.read_text(encoding="utf-8"))
        last_update = float(metadata["lastUpdate"])
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.debug(f"No usable metadata at {metadata_path}: {e}")
        return True
    return now_ms - last_update >= DAY_MS


async def ensure_docs(
    version: str,
    policy: UpdatePolicy = UpdatePolicy.MANUAL,
    docs_url: str = DEFAULT_DOCS_URL,
    client: httpx.AsyncClient | None = None,
    timeout: float = 60.0,
) -> DocsArtifacts:
    """Make sure all artifacts for `version` are cached, downloading as needed.

    Args:
        version: Zig version (e.g. "master", "0.14.1")
        policy: When present artifacts are refreshed
        docs_url: Base URL hosting <version>/std/main.wasm, <version>/std/sources.tar and <version>/
        client: HTTP client to use; one is created (and closed) when omitted
        timeout: Request timeout for the created client

    Returns:
        DocsArtifacts for the version's cache directory

    Raises:
        BrokenInvariant: If the version does not exist (HTTP 404) or its reference has no builtins
        TransientError: If a download fails for any other reason
    """
    artifacts = DocsArtifacts(get_version_cache_dir(version))
    due = should_update(policy, artifacts.metadata_path)
    base = f"{docs_url.rstrip('/')}/{version}"

    downloads = {
        artifacts.wasm_path: f"{base}/std/main.wasm",
        artifacts.sources_path: f"{base}/std/sources.tar",
    }
    pending = {path: url for path, url in downloads.items() if due or not path.exists()}
    scrape = due or not artifacts.builtins_path.exists()
    if not pending and not scrape:
        logger.debug(f"Using cached documentation for Zig {version} in {artifacts.directory}")
        return artifacts

    logger.info(f"Updating documentation for Zig {version} (policy={policy.value})")
    artifacts.directory.mkdir(parents=True, exist_ok=True)

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
    try:
        for path, url in pending.items():
            _write_atomic(path, await _fetch(client, url, version))
        if scrape:
            html = (await _fetch(client, f"{base}/", version)).decode("utf-8", errors="replace")
            functions = extract_builtin_functions(html, version)
            _write_atomic(artifacts.builtins_path, _builtin_list.dump_json(functions, indent=2))
    finally:
        if owns_client:
            await client.aclose()

    metadata = {"lastUpdate": int(time.time() * 1000), "version": version}
    _write_atomic(artifacts.metadata_path, json.dumps(metadata, indent=2).encode("utf-8"))
    logger.info(f"Documentation for Zig {version} is up to date")
    return artifacts


def load_builtins(path: Path) -> list[BuiltinFunction]:
    """Load the cached builtin function list.

    Raises:
        BrokenInvariant: If the file is missing or malformed
    """
    try:
        return _builtin_list.validate_json(path.read_bytes())
    except (OSError, ValidationError) as e:
        raise BrokenInvariant(f"Cannot load builtin functions from {path}: {e}. Run `zigdocs update`.") from e


async def _fetch(client: httpx.AsyncClient, url: str, version: str) -> bytes:
    logger.info(f"Downloading {url}")
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            raise BrokenInvariant(f"Zig version '{version}' not found ({url} returned 404)") from e
        raise TransientError(f"Download of {url} failed with HTTP {e.response.status_code}") from e
    except httpx.TimeoutException as e:
        raise TransientError(f"Download of {url} timed out") from e
    except httpx.RequestError as e:
        raise TransientError(f"Download of {url} failed: {type(e).__name__}: {e}") from e
    return response.content


def _write_atomic(path: Path, data: bytes) -> None:
    """Write via a temporary sibling and rename, so readers never see a partial file."""
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_bytes(data)
    os.replace(tmp, path)
