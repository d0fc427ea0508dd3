"""
ekstester/models/node_groups.py

Holds the Pydantic models (and Enum) for EKS managed node groups:
  - AMIType (Enum)
  - MNG
  - AddOnManagedNodeGroups
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List
from pydantic import BaseModel, Field


class AMIType(str, Enum):
    """
    AMI families supported for managed node groups.
    """

    AL2_X86_64 = "AL2_x86_64"
    AL2_X86_64_GPU = "AL2_x86_64_GPU"


class MNG(BaseModel):
    """A single managed node group.

    The map key in AddOnManagedNodeGroups.mngs must equal `name`.

    Attributes:
        name: Node group name.
        release_version: AMI release version, filled in by the EKS API.
        ami_type: One of the AMIType values. Kept as a plain string so an
            unknown value surfaces as a resolver error naming the group.
        asg_min_size: Minimum size of the auto scaling group.
        asg_max_size: Maximum size of the auto scaling group.
        asg_desired_capacity: Desired capacity of the auto scaling group.
        instance_types: EC2 instance types; defaulted from ami_type.
        volume_size: Root volume size in GB; defaulted when zero.
    """

    name: str = ""
    release_version: str = ""
    ami_type: str = ""
    asg_min_size: int = 0
    asg_max_size: int = 0
    asg_desired_capacity: int = 0
    instance_types: List[str] = Field(default_factory=list)
    volume_size: int = 0


class AddOnManagedNodeGroups(BaseModel):
    """Managed node group add-on. Every workload add-on runs on these nodes."""

    enable: bool = False
    signing_name: str = ""

    role_name: str = ""
    role_service_principals: List[str] = Field(default_factory=list)
    role_managed_policy_arns: List[str] = Field(default_factory=list)

    remote_access_private_key_path: str = ""
    remote_access_user_name: str = ""
    ssh_key_pair_name: str = ""

    logs_dir: str = ""

    mngs: Dict[str, MNG] = Field(default_factory=dict)


__all__ = ["AMIType", "MNG", "AddOnManagedNodeGroups"]
