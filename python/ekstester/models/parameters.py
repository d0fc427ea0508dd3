"""
ekstester/models/parameters.py

Defines the Pydantic model for user-facing EKS cluster parameters:
 - Parameters
"""

from __future__ import annotations

from typing import List
from pydantic import BaseModel, Field


class Parameters(BaseModel):
    """Cluster-level parameters consumed by the cluster creation step.

    Attributes:
        cluster_signing_name: Signing name for the EKS API.
        version: Kubernetes version (e.g. '1.14'). Must always be set.
        cluster_role_service_principals: Service principals for a new cluster role.
        cluster_role_managed_policy_arns: Managed policies for a new cluster role.
        cluster_role_arn: An existing cluster role. Mutually exclusive with the
            service principal / managed policy lists.
        vpc_cidr: CIDR for a new VPC. All-or-nothing with the three subnet CIDRs.
        private_subnet_cidr_1: First private subnet CIDR.
        private_subnet_cidr_2: Second private subnet CIDR.
        private_subnet_cidr_3: Third private subnet CIDR.
        private_subnet_ids: Pre-existing subnets, paired with the security group.
        control_plane_security_group_id: Pre-existing control plane security group.
    """

    cluster_signing_name: str = ""
    version: str = ""

    cluster_role_service_principals: List[str] = Field(default_factory=list)
    cluster_role_managed_policy_arns: List[str] = Field(default_factory=list)
    cluster_role_arn: str = ""

    vpc_cidr: str = ""
    private_subnet_cidr_1: str = ""
    private_subnet_cidr_2: str = ""
    private_subnet_cidr_3: str = ""

    private_subnet_ids: List[str] = Field(default_factory=list)
    control_plane_security_group_id: str = ""


__all__ = ["Parameters"]
