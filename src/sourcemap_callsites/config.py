"""Configuration for callsite mapping."""

import tomllib
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from sourcemap_callsites.log import get_logger

logger = get_logger(__name__)

CONFIG_TABLE = "sourcemap_callsites"
"""Name of the TOML table holding mapper settings."""

DEFAULT_CACHE_SIZE = 100
"""Default maximum number of cached consumers."""

DEFAULT_CONCURRENCY = 10
"""Default number of in-flight loads during async mapping."""


class ErrorPolicy(str, Enum):
    """How a batch reacts to a source map that fails to load."""

    LENIENT = "lenient"
    """Log the failure and return the callsite undecorated."""

    STRICT = "strict"
    """Abort the batch with the first load error."""


class MapperConfig(BaseModel):
    """Settings for a CallSiteMapper."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    policy: ErrorPolicy = ErrorPolicy.LENIENT
    cache_size: int = Field(default=DEFAULT_CACHE_SIZE, gt=0)
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, gt=0)


def load_config(path: Path | None = None) -> MapperConfig:
    """Load mapper settings from the ``[sourcemap_callsites]`` table of a TOML file.

    Args:
        path: TOML file to read. Defaults to ``pyproject.toml`` in the
            current working directory.

    Returns:
        Parsed configuration, or defaults if the file or table is missing
        or unreadable.

    Raises:
        pydantic.ValidationError: If the table holds invalid values.

    """
    config_path = path if path is not None else Path.cwd() / "pyproject.toml"
    if not config_path.exists():
        logger.debug("Config file %s not found, using defaults", config_path)
        return MapperConfig()

    try:
        with config_path.open("rb") as f:
            document = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug("Failed to load config from %s: %s", config_path, e)
        return MapperConfig()

    table = document.get(CONFIG_TABLE)
    if table is None:
        tool_table = document.get("tool", {})
        table = tool_table.get(CONFIG_TABLE) if isinstance(tool_table, dict) else None
    if table is None:
        return MapperConfig()

    return MapperConfig.model_validate(table)
