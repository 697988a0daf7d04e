"""Converter configuration loaded from ootw_decoder.toml.

Example file:

    [output]
    full_suffix = "-full"
    logical_suffix = "-logical"
    write_full = true
    write_logical = true

    [decode]
    mirror = true
    strict_size = false
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "OOTW_CONFIG"
CONFIG_FILENAME = "ootw_decoder.toml"


class OutputConfig(BaseModel):
    """Where and what to write.

    Attributes:
        full_suffix: Appended to the input stem for the full image
        logical_suffix: Appended to the input stem for the cropped image
        write_full: Write the full stored image
        write_logical: Write the logical (visible) image
    """

    model_config = {"extra": "forbid"}

    full_suffix: str = Field(default="-full", min_length=1)
    logical_suffix: str = Field(default="-logical", min_length=1)
    write_full: bool = True
    write_logical: bool = True


class DecodeConfig(BaseModel):
    """Decoding options.

    Attributes:
        mirror: Flip the assembled image horizontally (as the game does)
        strict_size: Reject files with surplus pixel data
    """

    model_config = {"extra": "forbid"}

    mirror: bool = True
    strict_size: bool = False


class DecoderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    output: OutputConfig = Field(default_factory=OutputConfig)
    decode: DecodeConfig = Field(default_factory=DecodeConfig)


def resolve_config_path(config_path: str | os.PathLike[str] | None = None) -> Path | None:
    """Resolve configuration path from env, explicit path, or defaults.

    Returns:
        Path to an existing config file, or None if no default file exists

    Raises:
        FileNotFoundError: If an explicitly requested file is missing
    """
    env_config = os.environ.get(CONFIG_ENV_VAR)
    requested = env_config or config_path
    if requested:
        path = Path(requested).expanduser()
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found at {path}")
        return path

    for candidate in (Path(CONFIG_FILENAME), Path.home() / CONFIG_FILENAME):
        if candidate.is_file():
            return candidate
    return None


def load_config(config_path: str | os.PathLike[str] | None = None) -> DecoderConfig:
    """Load converter configuration, falling back to defaults.

    Raises:
        FileNotFoundError: If an explicitly requested file is missing
        ValueError: If the file is not valid TOML or has unknown/invalid keys
    """
    path = resolve_config_path(config_path)
    if path is None:
        logger.debug("No %s found; using defaults", CONFIG_FILENAME)
        return DecoderConfig()

    try:
        with open(path, "rb") as f:
            raw: dict[str, Any] = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Failed to parse config {path}: {e}") from e

    try:
        config = DecoderConfig.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid config {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    return config
