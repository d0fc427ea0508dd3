"""
ekstester/config/checks.py

Cross-field checks. Each check is a pure predicate over the config: it
raises ConfigValidationError on the first violation and never mutates.

Paired fields are checked as groups: if any member of a group is set,
every member must be set.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, Tuple

from ekstester.config.defaults import LOG_LEVELS
from ekstester.config.errors import ConfigValidationError
from ekstester.config.regions import is_known_region
from ekstester.models.eks_config import EKSConfig
from ekstester.utils.host import host_os

Check = Callable[[EKSConfig], None]


def check_all_or_nothing(members: Sequence[Tuple[str, Any]]) -> None:
    """
    Require that either every (field, value) member is set or none is.

    Raises:
        ConfigValidationError: Naming the first set member and the first
            missing member.
    """
    present = [(field, value) for field, value in members if value]
    if not present or len(present) == len(members):
        return
    missing = next(field for field, value in members if not value)
    field, value = present[0]
    raise ConfigValidationError(
        f"non-empty {field} {value!r}, but empty {missing}", field=missing
    )


def check_identity(cfg: EKSConfig) -> None:
    """Region, name, and log settings."""
    if not is_known_region(cfg.region):
        raise ConfigValidationError(f"region {cfg.region!r} not found", field="region")
    if cfg.name == "":
        raise ConfigValidationError("name is empty", field="name")
    if cfg.name != cfg.name.lower():
        raise ConfigValidationError(
            f"name {cfg.name!r} must be in lower-case", field="name"
        )
    if len(cfg.log_outputs) == 0:
        raise ConfigValidationError("log_outputs is empty", field="log_outputs")
    if cfg.log_level not in LOG_LEVELS:
        raise ConfigValidationError(
            f"log_level {cfg.log_level!r} not one of {list(LOG_LEVELS)}",
            field="log_level",
        )


def check_kubectl_download_url(cfg: EKSConfig, platform: Optional[str] = None) -> None:
    """The kubectl binary must match the host OS family."""
    expected = host_os(platform)
    if expected not in cfg.kubectl_download_url:
        raise ConfigValidationError(
            f"kubectl_download_url {cfg.kubectl_download_url!r} build OS mismatch, "
            f"expected {expected!r}",
            field="kubectl_download_url",
        )


def check_cluster_role(cfg: EKSConfig) -> None:
    """Either create a cluster role (principals/policies) or reuse one (ARN)."""
    p = cfg.parameters
    if (
        p.cluster_role_service_principals or p.cluster_role_managed_policy_arns
    ) and p.cluster_role_arn:
        raise ConfigValidationError(
            f"non-empty parameters.cluster_role_service_principals "
            f"{p.cluster_role_service_principals} or "
            f"parameters.cluster_role_managed_policy_arns "
            f"{p.cluster_role_managed_policy_arns}, but got "
            f"parameters.cluster_role_arn {p.cluster_role_arn!r}",
            field="parameters.cluster_role_arn",
        )


def check_vpc_cidrs(cfg: EKSConfig) -> None:
    p = cfg.parameters
    check_all_or_nothing(
        [
            ("parameters.vpc_cidr", p.vpc_cidr),
            ("parameters.private_subnet_cidr_1", p.private_subnet_cidr_1),
            ("parameters.private_subnet_cidr_2", p.private_subnet_cidr_2),
            ("parameters.private_subnet_cidr_3", p.private_subnet_cidr_3),
        ]
    )


def check_existing_vpc(cfg: EKSConfig) -> None:
    p = cfg.parameters
    check_all_or_nothing(
        [
            ("parameters.private_subnet_ids", p.private_subnet_ids),
            (
                "parameters.control_plane_security_group_id",
                p.control_plane_security_group_id,
            ),
        ]
    )


def check_version(cfg: EKSConfig) -> None:
    # no implicit default: a drifting version across runs is unsafe
    if cfg.parameters.version == "":
        raise ConfigValidationError(
            "empty parameters.version", field="parameters.version"
        )


def status_groups(cfg: EKSConfig) -> List[List[Tuple[str, Any]]]:
    """
    Return the status field groups that must be set together.
    """
    s = cfg.status
    return [
        [
            ("status.cluster_role_cfn_stack_id", s.cluster_role_cfn_stack_id),
            ("status.cluster_role_name", s.cluster_role_name),
            ("status.cluster_role_arn", s.cluster_role_arn),
        ],
        [
            ("status.vpc_cfn_stack_id", s.vpc_cfn_stack_id),
            ("status.vpc_id", s.vpc_id),
            ("status.private_subnet_ids", s.private_subnet_ids),
            ("status.control_plane_security_group_id", s.control_plane_security_group_id),
        ],
        [
            ("status.cluster_cfn_stack_id", s.cluster_cfn_stack_id),
            ("status.cluster_arn", s.cluster_arn),
            ("status.cluster_ca", s.cluster_ca),
            ("status.cluster_ca_decoded", s.cluster_ca_decoded),
        ],
    ]


def check_status(cfg: EKSConfig) -> None:
    for group in status_groups(cfg):
        check_all_or_nothing(group)


# Order matters: the first violation is the one reported.
CROSS_FIELD_CHECKS: List[Check] = [
    check_cluster_role,
    check_vpc_cidrs,
    check_status,
    check_version,
    check_existing_vpc,
]


def run_cross_field_checks(cfg: EKSConfig) -> None:
    """Run every cross-field check in order, stopping at the first failure."""
    for check in CROSS_FIELD_CHECKS:
        check(cfg)
