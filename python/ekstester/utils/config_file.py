"""
ekstester/utils/config_file.py

Reads and writes the configuration document as YAML, asynchronously.
"""

from __future__ import annotations

import os

import aiofiles

from ekstester.config.errors import ConfigValidationError
from ekstester.models.eks_config import EKSConfig


async def read_config(path: str) -> EKSConfig:
    """
    Load an EKSConfig from a YAML file.

    Args:
        path: The config file to read.

    Returns:
        The decoded, type-checked (but not yet resolved) EKSConfig.

    Raises:
        ConfigValidationError: If the file does not exist or is not a valid document.
    """
    if not os.path.isfile(path):
        raise ConfigValidationError(f"config file not found: {path}", field="config_path")
    async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
        content = await f.read()
    return EKSConfig.from_yaml(content)


async def write_config(cfg: EKSConfig) -> str:
    """
    Persist a resolved EKSConfig to its config_path with mode 0600.

    Returns:
        The path written.

    Raises:
        ConfigValidationError: If config_path was never resolved.
        OSError: If the file cannot be written.
    """
    if cfg.config_path == "":
        raise ConfigValidationError("empty config_path", field="config_path")
    async with aiofiles.open(cfg.config_path, mode="w", encoding="utf-8") as f:
        await f.write(cfg.to_yaml())
    os.chmod(cfg.config_path, 0o600)
    return cfg.config_path
