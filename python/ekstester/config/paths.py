"""
ekstester/config/paths.py

Derives the config path and every output artifact path from the cluster
name. Re-running against an already resolved config changes nothing.

  <config-stem>.kubectl.sh        kubectl commands script
  <config-stem>.ssh.sh            SSH commands script
  <config-stem>.kubeconfig.yaml   kubeconfig
  <config-dir>/<name>-mng-logs    node group logs
"""

from __future__ import annotations

import logging
import os
import tempfile

from ekstester.models.eks_config import EKSConfig

logger = logging.getLogger(__name__)

DIR_MODE = 0o700


def config_stem(config_path: str) -> str:
    """Return the config path without its trailing '.yaml'."""
    return config_path[: -len(".yaml")] if config_path.endswith(".yaml") else config_path


def ensure_extension(path: str, ext: str) -> str:
    """Append `ext` unless `path` already ends with it."""
    return path if os.path.splitext(path)[1] == ext else path + ext


def _default_root_dir(name: str) -> str:
    try:
        return os.getcwd()
    except OSError:
        # cwd was removed from under us; fall back to a private scratch dir
        root = os.path.join(tempfile.gettempdir(), name)
        os.makedirs(root, mode=DIR_MODE, exist_ok=True)
        return root


def resolve_paths(cfg: EKSConfig) -> None:
    """
    Fill in config_path and the derived artifact paths in place.

    Raises:
        OSError: If the config directory cannot be created.
    """
    if cfg.config_path == "":
        cfg.config_path = os.path.join(
            _default_root_dir(cfg.name), f"{cfg.name}-config.yaml"
        )
    cfg.config_path = os.path.abspath(cfg.config_path)
    config_dir = os.path.dirname(cfg.config_path)
    os.makedirs(config_dir, mode=DIR_MODE, exist_ok=True)

    stem = config_stem(cfg.config_path)

    if cfg.kubectl_commands_output_path == "":
        cfg.kubectl_commands_output_path = stem + ".kubectl.sh"
    cfg.kubectl_commands_output_path = ensure_extension(
        cfg.kubectl_commands_output_path, ".sh"
    )

    if cfg.ssh_commands_output_path == "":
        cfg.ssh_commands_output_path = stem + ".ssh.sh"
    cfg.ssh_commands_output_path = ensure_extension(cfg.ssh_commands_output_path, ".sh")

    if cfg.kubeconfig_path == "":
        cfg.kubeconfig_path = stem + ".kubeconfig.yaml"
    cfg.kubeconfig_path = ensure_extension(cfg.kubeconfig_path, ".yaml")

    mngs = cfg.add_on_managed_node_groups
    if mngs.logs_dir == "":
        mngs.logs_dir = os.path.join(config_dir, f"{cfg.name}-mng-logs")

    # a lone console sink also gets a log file next to the config
    if len(cfg.log_outputs) == 1 and cfg.log_outputs[0] in ("stderr", "stdout"):
        cfg.log_outputs.append(stem + ".log")

    logger.debug("resolved config path %s", cfg.config_path)
