"""Safety checks and agent orchestration for restoring a Juju controller."""

from jujurestore.config import Settings, configure_logging, get_settings
from jujurestore.exceptions import (
    DataSourceError,
    NodeCommandError,
    NoPrimaryFoundError,
    NotRunningOnPrimaryError,
    RestoreError,
    UnhealthyMembersError,
    is_unhealthy_members_error,
)
from jujurestore.machine import Machine, controller_node_for_replica_set_member
from jujurestore.node import ControllerNode, ControllerNodeConverter
from jujurestore.replicaset import Database, MemoryDatabase, ReplicaSet, ReplicaSetMember
from jujurestore.restorer import Restorer

__all__ = [
    "create_restorer",
    "Restorer",
    "Database",
    "MemoryDatabase",
    "ReplicaSet",
    "ReplicaSetMember",
    "ControllerNode",
    "ControllerNodeConverter",
    "Machine",
    "controller_node_for_replica_set_member",
    "Settings",
    "get_settings",
    "configure_logging",
    "RestoreError",
    "DataSourceError",
    "UnhealthyMembersError",
    "NoPrimaryFoundError",
    "NotRunningOnPrimaryError",
    "NodeCommandError",
    "is_unhealthy_members_error",
]

__version__ = "0.1.0"


async def create_restorer(
    database: Database,
    *,
    converter: ControllerNodeConverter = controller_node_for_replica_set_member,
) -> Restorer:
    """Snapshot the database's replica set and build a Restorer for it.

    Args:
        database: Controller database to read the replica set from
        converter: Maps each replica set member to the node hosting it

    Returns:
        A Restorer over the current replica set

    Raises:
        DataSourceError: if the replica set can't be read
    """
    return await Restorer.create(database, converter)
