"""Pytest configuration for juju-restore tests."""

import pytest

from jujurestore.config import Settings
from jujurestore.replicaset import ReplicaSetMember


@pytest.fixture
def settings() -> Settings:
    """Create settings that ignore any .env file."""
    return Settings(_env_file=None, ssh_user="ubuntu", command_timeout=5.0)


@pytest.fixture
def primary_and_secondary() -> list[ReplicaSetMember]:
    """Two healthy members; this process runs on the primary."""
    return [
        ReplicaSetMember(
            id=2,
            name="djula",
            state="PRIMARY",
            healthy=True,
            is_self=True,
            juju_machine_id="2",
        ),
        ReplicaSetMember(
            id=1,
            name="wot",
            state="SECONDARY",
            healthy=True,
            juju_machine_id="1",
        ),
    ]
