"""Controller node interface used to manage agents across the cluster."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from jujurestore.replicaset import ReplicaSetMember


class ControllerNode(ABC):
    """A controller machine the restore can reach and manage."""

    @property
    @abstractmethod
    def ip(self) -> str:
        """Network identifier of the node.

        Results of cluster-wide actions are keyed by this value, so it
        should be unique across the cluster.
        """
        ...

    @abstractmethod
    async def ping(self) -> None:
        """Check the node is reachable, raising if it isn't."""
        ...

    @abstractmethod
    async def stop_agent(self) -> None:
        """Stop the machine agent on the node."""
        ...

    @abstractmethod
    async def start_agent(self) -> None:
        """Start the machine agent on the node."""
        ...


# Binds a replica set member to the node hosting it. Must not do I/O.
ControllerNodeConverter = Callable[[ReplicaSetMember], ControllerNode]
