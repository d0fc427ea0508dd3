"""
Shared fixtures: a default config anchored in a per-test directory.
"""

from datetime import datetime

import pytest

from ekstester.config.defaults import new_default
from ekstester.models.eks_config import EKSConfig
from ekstester.models.node_groups import MNG


@pytest.fixture
def cfg(tmp_path) -> EKSConfig:
    c = new_default(now=datetime(2020, 1, 15, 3))
    c.config_path = str(tmp_path / "test-config.yaml")
    return c


@pytest.fixture
def make_mng():
    def _make(name: str, **kwargs) -> MNG:
        fields = dict(
            name=name,
            ami_type="AL2_x86_64",
            asg_min_size=1,
            asg_max_size=3,
            asg_desired_capacity=2,
        )
        fields.update(kwargs)
        return MNG(**fields)

    return _make
