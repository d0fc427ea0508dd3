"""
ekstester/models/eks_config.py

Defines the root configuration document (EKSConfig) and its YAML codec.

All nested models use default factories, so two EKSConfig objects never share
lists or maps. The documented baseline values live in
ekstester.config.defaults.new_default(); the field defaults here are the
zero values that stand for "not set".
"""

from __future__ import annotations

import collections.abc
from typing import Any, Dict, List, Tuple, Union

import yaml
from pydantic import BaseModel, Field

from ekstester.config.errors import ConfigValidationError
from ekstester.models.addons import (
    AddOnALB2048,
    AddOnIRSA,
    AddOnJobEcho,
    AddOnJobPerl,
    AddOnNLBHelloWorld,
    AddOnSecrets,
)
from ekstester.models.node_groups import AddOnManagedNodeGroups
from ekstester.models.parameters import Parameters
from ekstester.models.status import Status, StatusManagedNodeGroups
from ekstester.models.validator import validate_document

WorkloadAddOn = Union[
    AddOnNLBHelloWorld,
    AddOnALB2048,
    AddOnJobPerl,
    AddOnJobEcho,
    AddOnSecrets,
    AddOnIRSA,
]


class EKSConfig(BaseModel):
    """The full configuration of one EKS test cluster.

    `name` is the root identity: every derived name and path is built from it.
    """

    config_path: str = ""
    kubectl_commands_output_path: str = ""
    ssh_commands_output_path: str = ""
    kubeconfig_path: str = ""

    name: str = ""
    aws_cli_path: str = ""
    region: str = ""

    log_level: str = ""
    log_outputs: List[str] = Field(default_factory=list)

    kubectl_download_url: str = ""
    kubectl_path: str = ""

    on_failure_delete: bool = False
    on_failure_delete_wait_seconds: int = 0

    parameters: Parameters = Field(default_factory=Parameters)

    add_on_managed_node_groups: AddOnManagedNodeGroups = Field(
        default_factory=AddOnManagedNodeGroups
    )
    add_on_nlb_hello_world: AddOnNLBHelloWorld = Field(
        default_factory=AddOnNLBHelloWorld
    )
    add_on_alb_2048: AddOnALB2048 = Field(default_factory=AddOnALB2048)
    add_on_job_perl: AddOnJobPerl = Field(default_factory=AddOnJobPerl)
    add_on_job_echo: AddOnJobEcho = Field(default_factory=AddOnJobEcho)
    add_on_secrets: AddOnSecrets = Field(default_factory=AddOnSecrets)
    add_on_irsa: AddOnIRSA = Field(default_factory=AddOnIRSA)

    status: Status = Field(default_factory=Status)
    status_managed_node_groups: StatusManagedNodeGroups = Field(
        default_factory=StatusManagedNodeGroups
    )

    def workload_add_ons(self) -> List[Tuple[str, WorkloadAddOn]]:
        """
        Return (field name, model) for every add-on that needs node groups to run on.
        """
        return [
            ("add_on_nlb_hello_world", self.add_on_nlb_hello_world),
            ("add_on_alb_2048", self.add_on_alb_2048),
            ("add_on_job_perl", self.add_on_job_perl),
            ("add_on_job_echo", self.add_on_job_echo),
            ("add_on_secrets", self.add_on_secrets),
            ("add_on_irsa", self.add_on_irsa),
        ]

    def to_yaml(self, *, sort_keys: bool = False) -> str:
        """
        Serialize this EKSConfig to a YAML string using PyYAML.
        """
        return yaml.dump(self.model_dump(), sort_keys=sort_keys)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> EKSConfig:
        """
        Deserialize an EKSConfig from a YAML string.

        Raises:
            ConfigValidationError: On malformed YAML, a repeated mapping key,
                or fields of the wrong type.
        """
        try:
            data = yaml.load(yaml_str, Loader=_UniqueKeyLoader)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"invalid YAML document: {e}") from e
        return validate_document(data if data is not None else {}, cls)


class _UniqueKeyLoader(yaml.SafeLoader):
    """
    SafeLoader that refuses repeated keys, so two node groups with the same
    map key cannot silently collapse into one. Keys pulled in through a
    merge key ('<<: *anchor') may still be overridden locally.
    """

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> Dict[Any, Any]:
        seen: Dict[Any, Any] = {}
        for key_node, _ in node.value:
            if key_node.tag == "tag:yaml.org,2002:merge":
                continue
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, collections.abc.Hashable):
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    "found unhashable key",
                    key_node.start_mark,
                )
            if key in seen:
                raise ConfigValidationError(
                    f"duplicate key {key!r} {key_node.start_mark}", field=str(key)
                )
            seen[key] = True
        return super().construct_mapping(node, deep=deep)


__all__ = ["EKSConfig", "WorkloadAddOn"]
