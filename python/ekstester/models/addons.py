"""
ekstester/models/addons.py

Pydantic models for the optional workload add-ons. Each add-on owns its own
namespace and sizing; derived names are only filled in while it is enabled.
"""

from __future__ import annotations

from typing import List
from pydantic import BaseModel, Field


class AddOnNLBHelloWorld(BaseModel):
    """Hello-world deployment behind a Network Load Balancer."""

    enable: bool = False
    namespace: str = ""
    deployment_replicas: int = 0


class AddOnALB2048(BaseModel):
    """2048 game deployment behind an ALB ingress controller."""

    enable: bool = False
    namespace: str = ""
    policy_name: str = ""
    deployment_replicas_alb: int = 0
    deployment_replicas_2048: int = 0


class AddOnJobPerl(BaseModel):
    """Batch 'Job' computing digits of pi with perl."""

    enable: bool = False
    namespace: str = ""
    completes: int = 0
    parallels: int = 0


class AddOnJobEcho(BaseModel):
    """Batch 'Job' echoing a payload of `size` bytes per completion."""

    enable: bool = False
    namespace: str = ""
    completes: int = 0
    parallels: int = 0
    size: int = 0


class AddOnSecrets(BaseModel):
    """Secret-store stress test: writes then reads `objects` Secrets.

    Attributes:
        objects: Number of Secret objects to write.
        size: Size of each Secret payload in bytes.
        secret_qps: Client QPS for Secret writes.
        secret_burst: Client burst for Secret writes.
        pod_qps: Client QPS for Pod creates.
        pod_burst: Client burst for Pod creates.
        writes_result_path: CSV file collecting write latencies.
        reads_result_path: CSV file collecting read latencies.
    """

    enable: bool = False
    namespace: str = ""

    objects: int = 0
    size: int = 0
    secret_qps: int = 0
    secret_burst: int = 0
    pod_qps: int = 0
    pod_burst: int = 0

    writes_result_path: str = ""
    reads_result_path: str = ""


class AddOnIRSA(BaseModel):
    """IAM Roles for Service Accounts workload, reading an S3 object."""

    enable: bool = False
    namespace: str = ""

    role_name: str = ""
    role_managed_policy_arns: List[str] = Field(default_factory=list)

    service_account_name: str = ""
    config_map_name: str = ""
    config_map_script_file_name: str = ""

    s3_bucket_name: str = ""
    s3_key: str = ""

    deployment_name: str = ""
    deployment_replicas: int = 0
    deployment_result_path: str = ""


__all__ = [
    "AddOnNLBHelloWorld",
    "AddOnALB2048",
    "AddOnJobPerl",
    "AddOnJobEcho",
    "AddOnSecrets",
    "AddOnIRSA",
]
