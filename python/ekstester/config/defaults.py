"""
ekstester/config/defaults.py

The default provider. new_default() is a pure factory: every call builds a
fresh EKSConfig with its own lists and maps, so successive resolutions never
alias each other's state.
"""

from __future__ import annotations

import os
import random
import string
import tempfile
from datetime import datetime
from typing import Optional

from ekstester.models.addons import (
    AddOnALB2048,
    AddOnIRSA,
    AddOnJobEcho,
    AddOnJobPerl,
    AddOnNLBHelloWorld,
    AddOnSecrets,
)
from ekstester.models.eks_config import EKSConfig
from ekstester.models.node_groups import MNG, AddOnManagedNodeGroups, AMIType
from ekstester.models.parameters import Parameters
from ekstester.utils.host import host_os

DEFAULT_REGION = "us-west-2"
DEFAULT_LOG_LEVEL = "info"
LOG_LEVELS = ("debug", "info", "warn", "error", "dpanic", "panic", "fatal")

# https://docs.aws.amazon.com/eks/latest/userguide/install-kubectl.html
DEFAULT_KUBECTL_DOWNLOAD_URL = "https://storage.googleapis.com/kubernetes-release/release/v1.14.10/bin/linux/amd64/kubectl"
DEFAULT_KUBECTL_PATH = "/tmp/aws-k8s-tester/kubectl"

DEFAULT_NODE_INSTANCE_TYPE_CPU = "c5.xlarge"
DEFAULT_NODE_INSTANCE_TYPE_GPU = "p3.8xlarge"
DEFAULT_NODE_VOLUME_SIZE = 40

DEFAULT_INSTANCE_TYPES = {
    AMIType.AL2_X86_64.value: DEFAULT_NODE_INSTANCE_TYPE_CPU,
    AMIType.AL2_X86_64_GPU.value: DEFAULT_NODE_INSTANCE_TYPE_GPU,
}

# ref. https://docs.aws.amazon.com/eks/latest/userguide/service-quotas.html
MNG_MAX_LIMIT = 10
MNG_NODES_MAX_LIMIT = 100

JOB_ECHO_SIZE_MAX_LIMIT = 250000

NAME_PREFIX = "eks"
NAME_SUFFIX_LENGTH = 12

_RAND_CHARS = string.ascii_lowercase + string.digits


def rand_string(n: int) -> str:
    """Return `n` random lower-case alphanumeric characters."""
    return "".join(random.choice(_RAND_CHARS) for _ in range(n))


def generate_name(now: Optional[datetime] = None) -> str:
    """
    Generate a cluster name, e.g. 'eks-2020011503-k3b9x0q1m2za'.

    The hour-resolution timestamp plus a random suffix keeps names unique
    across invocations without any coordination.
    """
    ts = now or datetime.now()
    return f"{NAME_PREFIX}-{ts:%Y%m%d%H}-{rand_string(NAME_SUFFIX_LENGTH)}"


def new_default(
    *,
    aws_cli_path: str = "",
    platform: Optional[str] = None,
    now: Optional[datetime] = None,
) -> EKSConfig:
    """Build a fresh default configuration.

    Args:
        aws_cli_path: Path of the AWS CLI, as found by require_aws_cli().
        platform: A sys.platform style value; defaults to the running host.
        now: Timestamp used in the generated name; defaults to the current time.

    Returns:
        An EKSConfig with the documented baseline and one CPU node group keyed
        by '<name>-mng-cpu'.
    """
    name = generate_name(now)
    mng_name = f"{name}-mng-cpu"

    kubectl_download_url = DEFAULT_KUBECTL_DOWNLOAD_URL
    private_key_path = os.path.join(os.path.expanduser("~"), ".ssh", "kube_aws_rsa")
    if host_os(platform) == "darwin":
        kubectl_download_url = kubectl_download_url.replace("linux", "darwin")
        private_key_path = os.path.join(
            tempfile.gettempdir(), rand_string(10) + ".insecure.key"
        )

    return EKSConfig(
        name=name,
        aws_cli_path=aws_cli_path,
        region=DEFAULT_REGION,
        log_level=DEFAULT_LOG_LEVEL,
        # "stderr", "stdout", or a file name
        log_outputs=["stderr"],
        kubectl_download_url=kubectl_download_url,
        kubectl_path=DEFAULT_KUBECTL_PATH,
        on_failure_delete=True,
        on_failure_delete_wait_seconds=60,
        parameters=Parameters(cluster_signing_name="eks", version="1.14"),
        add_on_managed_node_groups=AddOnManagedNodeGroups(
            enable=True,
            signing_name="eks",
            role_service_principals=["ec2.amazonaws.com", "eks.amazonaws.com"],
            role_managed_policy_arns=[
                "arn:aws:iam::aws:policy/AmazonEKSWorkerNodePolicy",
                "arn:aws:iam::aws:policy/AmazonEKS_CNI_Policy",
                "arn:aws:iam::aws:policy/AmazonEC2ContainerRegistryReadOnly",
            ],
            remote_access_private_key_path=private_key_path,
            remote_access_user_name="ec2-user",  # Amazon Linux 2
            mngs={
                mng_name: MNG(
                    name=mng_name,
                    ami_type=AMIType.AL2_X86_64.value,
                    asg_min_size=2,
                    asg_max_size=2,
                    asg_desired_capacity=2,
                    instance_types=[DEFAULT_NODE_INSTANCE_TYPE_CPU],
                    volume_size=DEFAULT_NODE_VOLUME_SIZE,
                )
            },
        ),
        add_on_nlb_hello_world=AddOnNLBHelloWorld(enable=True, deployment_replicas=3),
        add_on_alb_2048=AddOnALB2048(
            enable=False, deployment_replicas_alb=3, deployment_replicas_2048=3
        ),
        add_on_job_perl=AddOnJobPerl(enable=False, completes=30, parallels=10),
        # writes total 100 MB to etcd
        add_on_job_echo=AddOnJobEcho(
            enable=False, completes=1000, parallels=100, size=100 * 1024
        ),
        add_on_secrets=AddOnSecrets(
            enable=False,
            objects=1000,
            size=10 * 1024,
            secret_qps=1,
            secret_burst=1,
            pod_qps=100,
            pod_burst=5,
        ),
        add_on_irsa=AddOnIRSA(
            enable=False,
            role_managed_policy_arns=["arn:aws:iam::aws:policy/AmazonS3ReadOnlyAccess"],
            deployment_replicas=10,
        ),
    )
