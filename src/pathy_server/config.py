"""Configuration loading, validation and deterministic merge order."""

from __future__ import annotations

import threading
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path

from pathy_server.logging import DiagnosticLogger

CONFIG_FILE_NAME = "pathy.toml"

CONTEXT_GATING_MODES = ("off", "smart", "strict")
BASE_DIR_STRATEGIES = ("file_dir", "workspace_root", "both")
WORKSPACE_ROOT_STRATEGIES = ("lsp_root_uri", "disabled")
STAT_STRATEGIES = ("none", "lazy", "eager")

MAX_RESULTS_CAP = 5_000
CACHE_TTL_MS_CAP = 600_000
CACHE_MAX_DIRS_CAP = 4_096
MAX_DIR_ENTRIES_CAP = 100_000

DEFAULT_IGNORE_GLOBS = (
    "**/.git/**",
    "**/.venv/**",
    "**/venv/**",
    "**/__pycache__/**",
    "**/.pytest_cache/**",
    "**/.mypy_cache/**",
    "**/.ruff_cache/**",
    "**/node_modules/**",
)


@dataclass(slots=True, frozen=True)
class PathyConfig:
    """Fully validated, immutable configuration snapshot."""

    enable: bool = True
    path_prefix_fallback: bool = True
    context_gating: str = "smart"
    base_dir: str = "file_dir"
    workspace_root_strategy: str = "lsp_root_uri"
    max_results: int = 80
    show_hidden: bool = False
    include_files: bool = True
    include_directories: bool = True
    directory_trailing_slash: bool = True
    ignore_globs: tuple[str, ...] = DEFAULT_IGNORE_GLOBS
    prefer_forward_slashes: bool = True
    expand_tilde: bool = True
    windows_enable_drive_prefix: bool = True
    windows_enable_unc: bool = True
    cache_ttl_ms: int = 500
    cache_max_dirs: int = 64
    stat_strategy: str = "lazy"
    extra_path_calls: tuple[str, ...] = ()
    max_dir_entries: int = 2_000
    explicit_keys: frozenset[str] = frozenset()

    def is_explicit(self, key: str) -> bool:
        """Return True when ``key`` was supplied by the user rather than defaulted."""
        return key in self.explicit_keys

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for status responses."""
        output: dict[str, object] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, (tuple, frozenset)):
                value = sorted(value) if isinstance(value, frozenset) else list(value)
            output[item.name] = value
        return output


@dataclass(slots=True, frozen=True)
class ConfigWarning:
    """One rejected configuration value."""

    source: str
    key: str
    message: str


@dataclass(slots=True, frozen=True)
class ConfigLoadResult:
    """Merged configuration plus the warnings produced while merging."""

    config: PathyConfig
    warnings: tuple[ConfigWarning, ...]


def default_config() -> PathyConfig:
    """Build the default configuration."""
    return PathyConfig()


def select_settings_root(payload: object) -> Mapping[str, object] | None:
    """Locate the pathy settings table inside a client settings payload."""
    if not isinstance(payload, Mapping):
        return None
    current: Mapping[str, object] = payload
    settings = current.get("settings")
    if isinstance(settings, Mapping):
        current = settings
    lsp = current.get("lsp")
    if isinstance(lsp, Mapping):
        server = lsp.get("pathy")
        if isinstance(server, Mapping):
            nested = server.get("settings")
            if isinstance(nested, Mapping):
                return nested
            return server
    pathy = current.get("pathy")
    if isinstance(pathy, Mapping):
        return pathy
    return current


def load_workspace_config_file(
    workspace_root: Path | None,
) -> tuple[dict[str, object], tuple[ConfigWarning, ...]]:
    """Load optional pathy.toml from the workspace root."""
    if workspace_root is None:
        return {}, ()
    config_path = workspace_root / CONFIG_FILE_NAME
    if not config_path.is_file():
        return {}, ()
    try:
        with config_path.open("rb") as handle:
            payload = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as error:
        return {}, (
            ConfigWarning(
                source=CONFIG_FILE_NAME,
                key="*",
                message=f"could not read {config_path}: {error}",
            ),
        )
    table = payload.get("pathy", payload)
    if not isinstance(table, dict):
        return {}, (
            ConfigWarning(
                source=CONFIG_FILE_NAME,
                key="pathy",
                message="Config section 'pathy' must be a table.",
            ),
        )
    return table, ()


def merge_config(
    base: PathyConfig,
    payload: Mapping[str, object] | None,
    source: str = "client",
) -> ConfigLoadResult:
    """Overlay validated user values on ``base``; invalid values keep the base value.

    The base is the layer below, so an invalid client value keeps the value
    from ``pathy.toml`` when the file set one, and the default otherwise.
    """
    if not payload:
        return ConfigLoadResult(config=base, warnings=())
    updates: dict[str, object] = {}
    warnings: list[ConfigWarning] = []
    for key in sorted(payload.keys()):
        validator = _VALIDATORS.get(key)
        if validator is None:
            continue
        try:
            updates[key] = validator(key, payload[key])
        except ValueError as error:
            warnings.append(ConfigWarning(source=source, key=key, message=str(error)))
    explicit = base.explicit_keys | frozenset(updates)
    merged = replace(base, **updates, explicit_keys=explicit)
    return ConfigLoadResult(config=merged, warnings=tuple(warnings))


def load_effective_config(
    workspace_root: Path | None,
    client_payload: object,
    logger: DiagnosticLogger | None = None,
) -> PathyConfig:
    """Load config using merge order defaults -> pathy.toml -> client settings."""
    file_payload, file_warnings = load_workspace_config_file(workspace_root)
    from_file = merge_config(default_config(), file_payload, source=CONFIG_FILE_NAME)
    from_client = merge_config(
        from_file.config, select_settings_root(client_payload), source="client"
    )
    if logger is not None:
        for warning in (*file_warnings, *from_file.warnings, *from_client.warnings):
            logger.warn_once(
                f"config:{warning.source}:{warning.key}:{warning.message}",
                "config_invalid_value",
                warning.message,
                source=warning.source,
                key=warning.key,
            )
    return from_client.config


class ConfigStore:
    """Holds the current snapshot; readers see either the old or the new one."""

    def __init__(self, config: PathyConfig | None = None) -> None:
        self._lock = threading.Lock()
        self._config = config or default_config()

    def current(self) -> PathyConfig:
        """Return the active snapshot."""
        with self._lock:
            return self._config

    def replace(self, config: PathyConfig) -> PathyConfig:
        """Swap in a new snapshot and return the previous one."""
        with self._lock:
            previous = self._config
            self._config = config
        return previous


def _bool(key: str, value: object) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{key}' must be a boolean.")
    return value


def _choice(options: tuple[str, ...]) -> Callable[[str, object], str]:
    def validate(key: str, value: object) -> str:
        if not isinstance(value, str) or value not in options:
            raise ValueError(f"Config field '{key}' must be one of: {', '.join(options)}.")
        return value

    return validate


def _int_range(minimum: int, cap: int) -> Callable[[str, object], int]:
    def validate(key: str, value: object) -> int:
        if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
            raise ValueError(f"Config field '{key}' must be an integer >= {minimum}.")
        if value > cap:
            raise ValueError(f"Config field '{key}' must be <= {cap}.")
        return value

    return validate


def _tuple_of_strings(key: str, value: object) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"Config field '{key}' must be a list of strings.")
    output = tuple(item for item in value if isinstance(item, str) and item)
    if len(output) != len(value):
        raise ValueError(f"Config field '{key}' must contain only non-empty strings.")
    return output


def _ignore_globs(key: str, value: object) -> tuple[str, ...]:
    globs = _tuple_of_strings(key, value)
    if not globs:
        raise ValueError(f"Config field '{key}' must not be empty.")
    return globs


_VALIDATORS: dict[str, Callable[[str, object], object]] = {
    "enable": _bool,
    "path_prefix_fallback": _bool,
    "context_gating": _choice(CONTEXT_GATING_MODES),
    "base_dir": _choice(BASE_DIR_STRATEGIES),
    "workspace_root_strategy": _choice(WORKSPACE_ROOT_STRATEGIES),
    "max_results": _int_range(1, MAX_RESULTS_CAP),
    "show_hidden": _bool,
    "include_files": _bool,
    "include_directories": _bool,
    "directory_trailing_slash": _bool,
    "ignore_globs": _ignore_globs,
    "prefer_forward_slashes": _bool,
    "expand_tilde": _bool,
    "windows_enable_drive_prefix": _bool,
    "windows_enable_unc": _bool,
    "cache_ttl_ms": _int_range(0, CACHE_TTL_MS_CAP),
    "cache_max_dirs": _int_range(1, CACHE_MAX_DIRS_CAP),
    "stat_strategy": _choice(STAT_STRATEGIES),
    "extra_path_calls": _tuple_of_strings,
    "max_dir_entries": _int_range(1, MAX_DIR_ENTRIES_CAP),
}
