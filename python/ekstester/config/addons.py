"""
ekstester/config/addons.py

Resolves the managed node group add-on and the workload add-ons that run on
it. For each node group, in order:

  1) default the volume size
  2) default the instance types from the AMI type
  3) reject older instance generations when a load balancer add-on is on
  4) apply the auto scaling defaults, then check ordering and ceilings
  5) raise load balancer replica counts up to the desired capacity

Then every enabled workload add-on gets its derived names. When node groups
are disabled, no workload add-on may be enabled.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Dict, List

from ekstester.config.defaults import (
    DEFAULT_INSTANCE_TYPES,
    DEFAULT_NODE_VOLUME_SIZE,
    JOB_ECHO_SIZE_MAX_LIMIT,
    MNG_MAX_LIMIT,
    MNG_NODES_MAX_LIMIT,
)
from ekstester.config.errors import ConfigValidationError, PlatformLimitError
from ekstester.models.eks_config import EKSConfig
from ekstester.models.node_groups import MNG

logger = logging.getLogger(__name__)

# "m3.xlarge" or "c4.xlarge" fail with "InvalidTarget: Targets {...} are not supported"
# ref. https://github.com/aws/amazon-vpc-cni-k8s/pull/821
OLDER_INSTANCE_TYPE_PREFIXES = ("m3.", "c4.")

MNGS_FIELD = "add_on_managed_node_groups.mngs"


def _mng_field(key: str, attr: str) -> str:
    return f"{MNGS_FIELD}[{key!r}].{attr}"


def apply_asg_defaults(mng: MNG) -> None:
    """
    A desired capacity with no bounds pins both bounds to it:
    desired=10,min=0,max=0 => min=10,max=10. Anything else is kept as given.
    """
    if mng.asg_desired_capacity > 0 and mng.asg_min_size == 0 and mng.asg_max_size == 0:
        mng.asg_min_size = mng.asg_desired_capacity
        mng.asg_max_size = mng.asg_desired_capacity


def check_asg(key: str, mng: MNG) -> None:
    """Ordering and ceiling checks for one node group's auto scaling group."""
    if mng.asg_min_size > mng.asg_max_size:
        raise ConfigValidationError(
            f"{_mng_field(key, 'asg_min_size')} {mng.asg_min_size} > "
            f"asg_max_size {mng.asg_max_size}",
            field=_mng_field(key, "asg_min_size"),
        )
    if mng.asg_desired_capacity > mng.asg_max_size:
        raise ConfigValidationError(
            f"{_mng_field(key, 'asg_desired_capacity')} {mng.asg_desired_capacity} > "
            f"asg_max_size {mng.asg_max_size}",
            field=_mng_field(key, "asg_desired_capacity"),
        )
    if mng.asg_max_size > MNG_NODES_MAX_LIMIT:
        raise PlatformLimitError(
            f"{_mng_field(key, 'asg_max_size')} {mng.asg_max_size} > "
            f"MNG_NODES_MAX_LIMIT {MNG_NODES_MAX_LIMIT}",
            field=_mng_field(key, "asg_max_size"),
        )
    if mng.asg_desired_capacity > MNG_NODES_MAX_LIMIT:
        raise PlatformLimitError(
            f"{_mng_field(key, 'asg_desired_capacity')} {mng.asg_desired_capacity} > "
            f"MNG_NODES_MAX_LIMIT {MNG_NODES_MAX_LIMIT}",
            field=_mng_field(key, "asg_desired_capacity"),
        )


def check_node_group_set(cfg: EKSConfig) -> None:
    """Remote access settings, group count, and name uniqueness."""
    ng = cfg.add_on_managed_node_groups
    if ng.remote_access_private_key_path == "":
        raise ConfigValidationError(
            "empty add_on_managed_node_groups.remote_access_private_key_path",
            field="add_on_managed_node_groups.remote_access_private_key_path",
        )
    if ng.remote_access_user_name == "":
        raise ConfigValidationError(
            "empty add_on_managed_node_groups.remote_access_user_name",
            field="add_on_managed_node_groups.remote_access_user_name",
        )

    n = len(ng.mngs)
    if n == 0:
        raise ConfigValidationError(
            f"add_on_managed_node_groups.enable but empty {MNGS_FIELD}",
            field=MNGS_FIELD,
        )
    if n > MNG_MAX_LIMIT:
        raise PlatformLimitError(
            f"{MNGS_FIELD} {n} exceeds maximum number of node groups per EKS "
            f"which is {MNG_MAX_LIMIT}",
            field=MNGS_FIELD,
        )

    seen: Dict[str, str] = {}
    for key, mng in ng.mngs.items():
        if mng.name == "":
            raise ConfigValidationError(
                f"{_mng_field(key, 'name')} is empty", field=_mng_field(key, "name")
            )
        if mng.name in seen:
            raise ConfigValidationError(
                f"{_mng_field(key, 'name')} {mng.name!r} is redundant "
                f"(already used by {seen[mng.name]!r})",
                field=_mng_field(key, "name"),
            )
        seen[mng.name] = key
    for key, mng in ng.mngs.items():
        if key != mng.name:
            raise ConfigValidationError(
                f"{MNGS_FIELD}[{key!r}] has different name field {mng.name!r}",
                field=_mng_field(key, "name"),
            )


def resolve_node_group(cfg: EKSConfig, key: str, mng: MNG) -> None:
    """Apply the per node group defaults and checks, in order."""
    if mng.volume_size == 0:
        mng.volume_size = DEFAULT_NODE_VOLUME_SIZE

    if mng.ami_type not in DEFAULT_INSTANCE_TYPES:
        raise ConfigValidationError(
            f"unknown {_mng_field(key, 'ami_type')} {mng.ami_type!r}",
            field=_mng_field(key, "ami_type"),
        )
    if not mng.instance_types:
        mng.instance_types = [DEFAULT_INSTANCE_TYPES[mng.ami_type]]

    nlb, alb = cfg.add_on_nlb_hello_world, cfg.add_on_alb_2048
    if nlb.enable or alb.enable:
        older = next(
            (
                itp
                for itp in mng.instance_types
                if itp.startswith(OLDER_INSTANCE_TYPE_PREFIXES)
            ),
            None,
        )
        if older is not None:
            raise ConfigValidationError(
                f"add_on_nlb_hello_world.enable[{nlb.enable}] || "
                f"add_on_alb_2048.enable[{alb.enable}], but older instance type "
                f"{older!r} for {key!r}",
                field=_mng_field(key, "instance_types"),
            )

    apply_asg_defaults(mng)
    check_asg(key, mng)

    # replica counts only ever go up
    desired = mng.asg_desired_capacity
    if nlb.enable and nlb.deployment_replicas < desired:
        nlb.deployment_replicas = desired
    if alb.enable and alb.deployment_replicas_alb < desired:
        alb.deployment_replicas_alb = desired
    if alb.enable and alb.deployment_replicas_2048 < desired:
        alb.deployment_replicas_2048 = desired


def _check_namespace(field: str, namespace: str, name: str) -> None:
    if namespace == name:
        raise ConfigValidationError(
            f"{field} {namespace!r} conflicts with {name!r}", field=field
        )


def _check_extension(field: str, path: str, ext: str) -> None:
    if os.path.splitext(path)[1] != ext:
        raise ConfigValidationError(
            f"expected {ext} extension for {field}, got {path!r}", field=field
        )


def _resolve_nlb_hello_world(cfg: EKSConfig, config_dir: str) -> None:
    a = cfg.add_on_nlb_hello_world
    if a.namespace == "":
        a.namespace = f"{cfg.name}-nlb-hello-world"
    _check_namespace("add_on_nlb_hello_world.namespace", a.namespace, cfg.name)


def _resolve_alb_2048(cfg: EKSConfig, config_dir: str) -> None:
    a = cfg.add_on_alb_2048
    if a.namespace == "":
        a.namespace = f"{cfg.name}-alb-2048"
    _check_namespace("add_on_alb_2048.namespace", a.namespace, cfg.name)
    if a.policy_name == "":
        a.policy_name = f"{cfg.name}-alb-ingress-controller-policy"


def _resolve_job_perl(cfg: EKSConfig, config_dir: str) -> None:
    a = cfg.add_on_job_perl
    if a.namespace == "":
        a.namespace = f"{cfg.name}-job-perl"
    _check_namespace("add_on_job_perl.namespace", a.namespace, cfg.name)


def _resolve_job_echo(cfg: EKSConfig, config_dir: str) -> None:
    a = cfg.add_on_job_echo
    if a.namespace == "":
        a.namespace = f"{cfg.name}-job-echo"
    _check_namespace("add_on_job_echo.namespace", a.namespace, cfg.name)


def _resolve_secrets(cfg: EKSConfig, config_dir: str) -> None:
    a = cfg.add_on_secrets
    if a.namespace == "":
        a.namespace = f"{cfg.name}-secrets"
    _check_namespace("add_on_secrets.namespace", a.namespace, cfg.name)

    if a.writes_result_path == "":
        a.writes_result_path = os.path.join(config_dir, f"{cfg.name}-secret-writes.csv")
    _check_extension("add_on_secrets.writes_result_path", a.writes_result_path, ".csv")

    if a.reads_result_path == "":
        a.reads_result_path = os.path.join(config_dir, f"{cfg.name}-secret-reads.csv")
    _check_extension("add_on_secrets.reads_result_path", a.reads_result_path, ".csv")


def _resolve_irsa(cfg: EKSConfig, config_dir: str) -> None:
    a = cfg.add_on_irsa
    prefix = f"{cfg.name}-irsa"
    if a.namespace == "":
        a.namespace = prefix
    _check_namespace("add_on_irsa.namespace", a.namespace, cfg.name)
    if a.role_name == "":
        a.role_name = f"{prefix}-role"
    if a.service_account_name == "":
        a.service_account_name = f"{prefix}-service-account"
    if a.config_map_name == "":
        a.config_map_name = f"{prefix}-configmap"
    if a.config_map_script_file_name == "":
        a.config_map_script_file_name = f"{prefix}-configmap.sh"
    if a.s3_bucket_name == "":
        a.s3_bucket_name = f"{prefix}-s3-bucket"
    if a.s3_key == "":
        a.s3_key = f"{prefix}-s3-key"
    if a.deployment_name == "":
        a.deployment_name = f"{prefix}-deployment"
    if a.deployment_result_path == "":
        a.deployment_result_path = os.path.join(
            config_dir, f"{prefix}-deployment-result.log"
        )


ADD_ON_RESOLVERS: Dict[str, Callable[[EKSConfig, str], None]] = {
    "add_on_nlb_hello_world": _resolve_nlb_hello_world,
    "add_on_alb_2048": _resolve_alb_2048,
    "add_on_job_perl": _resolve_job_perl,
    "add_on_job_echo": _resolve_job_echo,
    "add_on_secrets": _resolve_secrets,
    "add_on_irsa": _resolve_irsa,
}


def check_disabled_closure(cfg: EKSConfig) -> None:
    """With node groups disabled, workloads have nowhere to run."""
    for field, add_on in cfg.workload_add_ons():
        if add_on.enable:
            raise ConfigValidationError(
                f"add_on_managed_node_groups.enable False, but got "
                f"{field}.enable {add_on.enable}",
                field=f"{field}.enable",
            )


def resolve_add_ons(cfg: EKSConfig) -> None:
    """
    Resolve the node group add-on and every workload add-on in place.

    Raises:
        ConfigValidationError: On the first invalid or contradictory field.
        PlatformLimitError: On the first field over a platform ceiling.
    """
    ng = cfg.add_on_managed_node_groups
    if ng.role_name == "":
        ng.role_name = f"{cfg.name}-mng-role"
    if ng.ssh_key_pair_name == "":
        ng.ssh_key_pair_name = f"{cfg.name}-ssh"

    if not ng.enable:
        check_disabled_closure(cfg)
        return

    check_node_group_set(cfg)
    for key, mng in ng.mngs.items():
        resolve_node_group(cfg, key, mng)

    if cfg.add_on_job_echo.size > JOB_ECHO_SIZE_MAX_LIMIT:
        raise PlatformLimitError(
            f"add_on_job_echo.size limit is {JOB_ECHO_SIZE_MAX_LIMIT} bytes, "
            f"got {cfg.add_on_job_echo.size}",
            field="add_on_job_echo.size",
        )

    config_dir = os.path.dirname(cfg.config_path)
    enabled: List[str] = []
    for field, add_on in cfg.workload_add_ons():
        if add_on.enable:
            ADD_ON_RESOLVERS[field](cfg, config_dir)
            enabled.append(field)
    logger.debug("resolved %d node group(s), add-ons %s", len(ng.mngs), enabled)
