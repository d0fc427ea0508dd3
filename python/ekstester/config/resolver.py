"""
ekstester/config/resolver.py

Runs a configuration through every defaulting and validation pass, in order:

  1) identity checks (region, name, log settings)
  2) path resolution
  3) kubectl download URL vs. host OS
  4) cross-field checks (role, VPC, status pairs, version)
  5) add-on resolution (node groups, then workload add-ons)

The first violation aborts with a single error. Mutations made by earlier
passes are not rolled back; a failed config is meant to be discarded and
rebuilt from its source. Resolving an already resolved config changes nothing.
"""

from __future__ import annotations

import logging
from typing import Optional

from ekstester.config.addons import resolve_add_ons
from ekstester.config.checks import (
    check_identity,
    check_kubectl_download_url,
    run_cross_field_checks,
)
from ekstester.config.paths import resolve_paths
from ekstester.models.eks_config import EKSConfig

logger = logging.getLogger(__name__)


def resolve(cfg: EKSConfig, *, platform: Optional[str] = None) -> EKSConfig:
    """Fill in every default and validate the config, in place.

    Args:
        cfg: The config to resolve. Must not be mutated concurrently.
        platform: A sys.platform style value; defaults to the running host.

    Returns:
        The same EKSConfig, fully resolved.

    Raises:
        ConfigValidationError: On the first missing, invalid, or contradictory field.
        PlatformLimitError: On the first field over a platform ceiling.
        OSError: If the config directory cannot be created.
    """
    check_identity(cfg)
    resolve_paths(cfg)
    check_kubectl_download_url(cfg, platform)
    run_cross_field_checks(cfg)
    resolve_add_ons(cfg)
    logger.info("resolved config %r at %s", cfg.name, cfg.config_path)
    return cfg
