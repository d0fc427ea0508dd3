import pytest

from ekstester.config.addons import (
    apply_asg_defaults,
    resolve_add_ons,
)
from ekstester.config.errors import ConfigValidationError, PlatformLimitError
from ekstester.config.paths import resolve_paths
from ekstester.models.node_groups import MNG

WORKLOAD_ADD_ONS = [
    "add_on_nlb_hello_world",
    "add_on_alb_2048",
    "add_on_job_perl",
    "add_on_job_echo",
    "add_on_secrets",
    "add_on_irsa",
]


@pytest.fixture
def rcfg(cfg):
    """Config with paths resolved, as the resolver hands it to add-ons."""
    resolve_paths(cfg)
    return cfg


def _only(cfg, *mngs):
    cfg.add_on_managed_node_groups.mngs = {m.name: m for m in mngs}


# auto scaling defaults


def test_asg_desired_pins_unset_bounds():
    mng = MNG(asg_desired_capacity=10, asg_min_size=0, asg_max_size=0)
    apply_asg_defaults(mng)
    assert (mng.asg_desired_capacity, mng.asg_min_size, mng.asg_max_size) == (10, 10, 10)


def test_asg_zero_desired_keeps_bounds():
    mng = MNG(asg_desired_capacity=0, asg_min_size=1, asg_max_size=10)
    apply_asg_defaults(mng)
    assert (mng.asg_desired_capacity, mng.asg_min_size, mng.asg_max_size) == (0, 1, 10)


def test_asg_law_through_resolution(rcfg, make_mng):
    _only(
        rcfg,
        make_mng("pinned", asg_desired_capacity=10, asg_min_size=0, asg_max_size=0),
        make_mng("ranged", asg_desired_capacity=0, asg_min_size=1, asg_max_size=10),
    )
    resolve_add_ons(rcfg)
    pinned = rcfg.add_on_managed_node_groups.mngs["pinned"]
    ranged = rcfg.add_on_managed_node_groups.mngs["ranged"]
    assert (pinned.asg_desired_capacity, pinned.asg_min_size, pinned.asg_max_size) == (10, 10, 10)
    assert (ranged.asg_desired_capacity, ranged.asg_min_size, ranged.asg_max_size) == (0, 1, 10)


@pytest.mark.parametrize(
    "kwargs,error,match",
    [
        (dict(asg_min_size=4, asg_max_size=3, asg_desired_capacity=3), ConfigValidationError, "asg_min_size 4 > asg_max_size 3"),
        (dict(asg_min_size=1, asg_max_size=3, asg_desired_capacity=5), ConfigValidationError, "asg_desired_capacity 5 > asg_max_size 3"),
        (dict(asg_min_size=1, asg_max_size=101, asg_desired_capacity=5), PlatformLimitError, "asg_max_size 101 > MNG_NODES_MAX_LIMIT 100"),
        (dict(asg_min_size=0, asg_max_size=0, asg_desired_capacity=101), PlatformLimitError, "asg_max_size 101"),
    ],
)
def test_asg_ordering_and_ceilings(rcfg, make_mng, kwargs, error, match):
    _only(rcfg, make_mng("ng", **kwargs))
    with pytest.raises(error, match=match):
        resolve_add_ons(rcfg)


# node group defaults


def test_volume_and_instance_type_defaults(rcfg, make_mng):
    _only(
        rcfg,
        make_mng("cpu", volume_size=0, instance_types=[]),
        make_mng("gpu", ami_type="AL2_x86_64_GPU", volume_size=0, instance_types=[]),
        make_mng("custom", volume_size=200, instance_types=["m5.2xlarge"]),
    )
    resolve_add_ons(rcfg)
    mngs = rcfg.add_on_managed_node_groups.mngs
    assert mngs["cpu"].volume_size == 40
    assert mngs["cpu"].instance_types == ["c5.xlarge"]
    assert mngs["gpu"].instance_types == ["p3.8xlarge"]
    assert mngs["custom"].volume_size == 200
    assert mngs["custom"].instance_types == ["m5.2xlarge"]


def test_unknown_ami_type_is_rejected(rcfg, make_mng):
    _only(rcfg, make_mng("ng", ami_type="BOTTLEROCKET_x86_64"))
    with pytest.raises(ConfigValidationError, match="unknown .*ami_type 'BOTTLEROCKET_x86_64'"):
        resolve_add_ons(rcfg)


@pytest.mark.parametrize("instance_type", ["m3.xlarge", "c4.xlarge"])
@pytest.mark.parametrize("add_on", ["add_on_nlb_hello_world", "add_on_alb_2048"])
def test_older_instance_types_rejected_with_load_balancers(rcfg, make_mng, instance_type, add_on):
    rcfg.add_on_nlb_hello_world.enable = False
    getattr(rcfg, add_on).enable = True
    _only(rcfg, make_mng("ng", instance_types=["c5.xlarge", instance_type]))
    with pytest.raises(ConfigValidationError, match=f"older instance type '{instance_type}'"):
        resolve_add_ons(rcfg)


def test_older_instance_types_allowed_without_load_balancers(rcfg, make_mng):
    rcfg.add_on_nlb_hello_world.enable = False
    rcfg.add_on_alb_2048.enable = False
    _only(rcfg, make_mng("ng", instance_types=["m3.xlarge"]))
    resolve_add_ons(rcfg)


# replica propagation


def test_replicas_rise_to_max_desired_capacity(rcfg, make_mng):
    rcfg.add_on_alb_2048.enable = True
    _only(
        rcfg,
        make_mng("a", asg_min_size=1, asg_max_size=10, asg_desired_capacity=8),
        make_mng("b", asg_min_size=1, asg_max_size=10, asg_desired_capacity=5),
    )
    resolve_add_ons(rcfg)
    assert rcfg.add_on_nlb_hello_world.deployment_replicas == 8
    assert rcfg.add_on_alb_2048.deployment_replicas_alb == 8
    assert rcfg.add_on_alb_2048.deployment_replicas_2048 == 8


def test_replicas_never_decrease(rcfg, make_mng):
    rcfg.add_on_nlb_hello_world.deployment_replicas = 20
    _only(rcfg, make_mng("a", asg_min_size=1, asg_max_size=10, asg_desired_capacity=8))
    resolve_add_ons(rcfg)
    assert rcfg.add_on_nlb_hello_world.deployment_replicas == 20


def test_disabled_add_on_replicas_untouched(rcfg, make_mng):
    rcfg.add_on_alb_2048.enable = False
    _only(rcfg, make_mng("a", asg_min_size=1, asg_max_size=10, asg_desired_capacity=8))
    resolve_add_ons(rcfg)
    assert rcfg.add_on_alb_2048.deployment_replicas_alb == 3


# node group set


def test_node_group_role_and_key_pair_defaults(rcfg):
    resolve_add_ons(rcfg)
    ng = rcfg.add_on_managed_node_groups
    assert ng.role_name == f"{rcfg.name}-mng-role"
    assert ng.ssh_key_pair_name == f"{rcfg.name}-ssh"


def test_empty_node_group_set_is_rejected(rcfg):
    rcfg.add_on_managed_node_groups.mngs = {}
    with pytest.raises(ConfigValidationError, match="empty add_on_managed_node_groups.mngs"):
        resolve_add_ons(rcfg)


def test_too_many_node_groups(rcfg, make_mng):
    _only(rcfg, *[make_mng(f"ng-{i}") for i in range(11)])
    with pytest.raises(PlatformLimitError, match="exceeds maximum number of node groups"):
        resolve_add_ons(rcfg)


def test_ten_node_groups_is_allowed(rcfg, make_mng):
    _only(rcfg, *[make_mng(f"ng-{i}") for i in range(10)])
    resolve_add_ons(rcfg)


def test_key_must_match_name(rcfg, make_mng):
    rcfg.add_on_managed_node_groups.mngs = {"key": make_mng("other")}
    with pytest.raises(ConfigValidationError, match="has different name field 'other'"):
        resolve_add_ons(rcfg)


def test_duplicate_name_fields_are_rejected(rcfg, make_mng):
    rcfg.add_on_managed_node_groups.mngs = {"a": make_mng("same"), "b": make_mng("same")}
    with pytest.raises(ConfigValidationError, match="'same' is redundant"):
        resolve_add_ons(rcfg)


def test_empty_name_is_rejected(rcfg, make_mng):
    rcfg.add_on_managed_node_groups.mngs = {"a": make_mng("")}
    with pytest.raises(ConfigValidationError, match=r"\['a'\].name is empty"):
        resolve_add_ons(rcfg)


@pytest.mark.parametrize(
    "field", ["remote_access_private_key_path", "remote_access_user_name"]
)
def test_remote_access_required(rcfg, field):
    setattr(rcfg.add_on_managed_node_groups, field, "")
    with pytest.raises(ConfigValidationError, match=field):
        resolve_add_ons(rcfg)


def test_job_echo_size_ceiling(rcfg):
    rcfg.add_on_job_echo.size = 250000
    resolve_add_ons(rcfg)
    rcfg.add_on_job_echo.size = 250001
    with pytest.raises(PlatformLimitError, match="got 250001"):
        resolve_add_ons(rcfg)


# disabled node groups


@pytest.mark.parametrize("add_on", WORKLOAD_ADD_ONS)
def test_disabled_node_groups_reject_each_workload(rcfg, add_on):
    rcfg.add_on_managed_node_groups.enable = False
    rcfg.add_on_nlb_hello_world.enable = False
    getattr(rcfg, add_on).enable = True
    with pytest.raises(ConfigValidationError, match=f"{add_on}.enable True") as exc_info:
        resolve_add_ons(rcfg)
    assert exc_info.value.field == f"{add_on}.enable"


def test_disabled_node_groups_without_workloads(rcfg):
    rcfg.add_on_managed_node_groups.enable = False
    rcfg.add_on_nlb_hello_world.enable = False
    rcfg.add_on_managed_node_groups.mngs = {}
    resolve_add_ons(rcfg)
    assert rcfg.add_on_managed_node_groups.role_name == f"{rcfg.name}-mng-role"


# workload add-on names


def test_add_on_names_only_for_enabled(rcfg):
    resolve_add_ons(rcfg)
    assert rcfg.add_on_nlb_hello_world.namespace == f"{rcfg.name}-nlb-hello-world"
    assert rcfg.add_on_alb_2048.namespace == ""
    assert rcfg.add_on_irsa.role_name == ""
    assert rcfg.add_on_secrets.writes_result_path == ""


def test_all_add_on_names(rcfg, tmp_path):
    for add_on in WORKLOAD_ADD_ONS:
        getattr(rcfg, add_on).enable = True
    resolve_add_ons(rcfg)
    n = rcfg.name
    assert rcfg.add_on_alb_2048.namespace == f"{n}-alb-2048"
    assert rcfg.add_on_alb_2048.policy_name == f"{n}-alb-ingress-controller-policy"
    assert rcfg.add_on_job_perl.namespace == f"{n}-job-perl"
    assert rcfg.add_on_job_echo.namespace == f"{n}-job-echo"
    assert rcfg.add_on_secrets.namespace == f"{n}-secrets"
    assert rcfg.add_on_secrets.writes_result_path == str(tmp_path / f"{n}-secret-writes.csv")
    assert rcfg.add_on_secrets.reads_result_path == str(tmp_path / f"{n}-secret-reads.csv")
    irsa = rcfg.add_on_irsa
    assert irsa.namespace == f"{n}-irsa"
    assert irsa.role_name == f"{n}-irsa-role"
    assert irsa.service_account_name == f"{n}-irsa-service-account"
    assert irsa.config_map_name == f"{n}-irsa-configmap"
    assert irsa.config_map_script_file_name == f"{n}-irsa-configmap.sh"
    assert irsa.s3_bucket_name == f"{n}-irsa-s3-bucket"
    assert irsa.s3_key == f"{n}-irsa-s3-key"
    assert irsa.deployment_name == f"{n}-irsa-deployment"
    assert irsa.deployment_result_path == str(tmp_path / f"{n}-irsa-deployment-result.log")


def test_explicit_add_on_names_are_kept(rcfg):
    rcfg.add_on_irsa.enable = True
    rcfg.add_on_irsa.s3_bucket_name = "shared-bucket"
    rcfg.add_on_nlb_hello_world.namespace = "hello"
    resolve_add_ons(rcfg)
    assert rcfg.add_on_irsa.s3_bucket_name == "shared-bucket"
    assert rcfg.add_on_nlb_hello_world.namespace == "hello"


@pytest.mark.parametrize("add_on", WORKLOAD_ADD_ONS)
def test_namespace_must_differ_from_name(rcfg, add_on):
    getattr(rcfg, add_on).enable = True
    getattr(rcfg, add_on).namespace = rcfg.name
    with pytest.raises(ConfigValidationError, match=f"{add_on}.namespace .* conflicts with"):
        resolve_add_ons(rcfg)


@pytest.mark.parametrize("field", ["writes_result_path", "reads_result_path"])
def test_secrets_result_paths_need_csv(rcfg, tmp_path, field):
    rcfg.add_on_secrets.enable = True
    setattr(rcfg.add_on_secrets, field, str(tmp_path / "results.txt"))
    with pytest.raises(ConfigValidationError, match=f"expected .csv extension for add_on_secrets.{field}"):
        resolve_add_ons(rcfg)


def test_secrets_csv_result_path_passes_unchanged(rcfg, tmp_path):
    rcfg.add_on_secrets.enable = True
    rcfg.add_on_secrets.writes_result_path = str(tmp_path / "w.csv")
    resolve_add_ons(rcfg)
    assert rcfg.add_on_secrets.writes_result_path == str(tmp_path / "w.csv")
