"""
ekstester/models/status.py

Read-only status models. Provisioning fills these in; the resolver only
checks that the identifiers arrive in complete groups.
"""

from __future__ import annotations

from typing import Dict, List
from pydantic import BaseModel, Field


class Status(BaseModel):
    """Cluster status as written back by the provisioning steps.

    Each CloudFormation stack ID travels with the resources it produced:
      - cluster_role_cfn_stack_id <-> cluster_role_name, cluster_role_arn
      - vpc_cfn_stack_id <-> vpc_id, private_subnet_ids, control_plane_security_group_id
      - cluster_cfn_stack_id <-> cluster_arn, cluster_ca, cluster_ca_decoded
    """

    up: bool = False

    cluster_role_cfn_stack_id: str = ""
    cluster_role_name: str = ""
    cluster_role_arn: str = ""

    vpc_cfn_stack_id: str = ""
    vpc_id: str = ""
    private_subnet_ids: List[str] = Field(default_factory=list)
    control_plane_security_group_id: str = ""

    cluster_cfn_stack_id: str = ""
    cluster_arn: str = ""
    cluster_ca: str = ""
    cluster_ca_decoded: str = ""

    cluster_api_server_endpoint: str = ""
    cluster_oidc_issuer_url: str = ""


class StatusManagedNodeGroup(BaseModel):
    """Status of a single managed node group."""

    cfn_stack_id: str = ""
    status: str = ""


class StatusManagedNodeGroups(BaseModel):
    """Status of all managed node groups, keyed by node group name."""

    role_cfn_stack_id: str = ""
    nvidia_driver_installed: bool = False
    nodes: Dict[str, StatusManagedNodeGroup] = Field(default_factory=dict)


__all__ = ["Status", "StatusManagedNodeGroup", "StatusManagedNodeGroups"]
