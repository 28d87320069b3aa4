"""
Engine configuration for definition resolution.

Provides a process-wide EngineConfig plus a contextvars-based override scope.

DUAL LOOKUP PATTERN:
- _engine_config: process default (set by the hosting application at startup)
- _engine_config_override: scoped override (engine_config_context(), tests)

get_engine_config() prefers the scoped override and falls back to the default.
"""

import contextvars
import dataclasses
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Generator, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Tunable behavior of the resolution engine.

    Attributes:
        implicit_anchor_index: Data index assumed for paths that stay relative
            after the parent path has been prepended (``name`` -> ``%0%.name``).
        dump_data_on_path_warning: Include the encoded data array in path
            resolution warnings. Disable for large payloads.
        default_selection_data_path: Selection path a table panel falls back to
            when the server does not send one.
        definition_namespace: Namespace of the definition type names on the wire.
    """
    implicit_anchor_index: int = 0
    dump_data_on_path_warning: bool = True
    default_selection_data_path: str = '%i%'
    definition_namespace: str = 'xmcp.forms.datatypes'


_DEFAULT_CONFIG = EngineConfig()
_engine_config: EngineConfig = _DEFAULT_CONFIG
_engine_config_override: contextvars.ContextVar[Optional[EngineConfig]] = contextvars.ContextVar(
    '_engine_config_override', default=None
)


def get_engine_config() -> EngineConfig:
    """Return the active engine config (scoped override first, then process default)."""
    override = _engine_config_override.get()
    return override if override is not None else _engine_config


def set_engine_config(config: EngineConfig) -> None:
    """Set the process-wide engine config.

    Args:
        config: The config every resolution call sees outside engine_config_context()
    """
    global _engine_config
    _engine_config = config
    logger.debug(f"Engine config set: {config}")


def reset_engine_config() -> None:
    """Restore the built-in defaults."""
    global _engine_config
    _engine_config = _DEFAULT_CONFIG
    _engine_config_override.set(None)


@contextmanager
def engine_config_context(**overrides: Any) -> Generator[EngineConfig, None, None]:
    """Temporarily override engine config fields.

    Overrides are layered on the active config, so contexts nest:

        with engine_config_context(dump_data_on_path_warning=False):
            definition.resolve_data(data)

    Args:
        **overrides: EngineConfig field names and their scoped values

    Yields:
        The merged config that is active inside the block
    """
    merged = dataclasses.replace(get_engine_config(), **overrides)
    token = _engine_config_override.set(merged)
    try:
        yield merged
    finally:
        _engine_config_override.reset(token)
