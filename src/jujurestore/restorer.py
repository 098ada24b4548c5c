"""Safety checks and agent management for restoring a controller database."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from jujurestore.exceptions import (
    DataSourceError,
    NoPrimaryFoundError,
    NotRunningOnPrimaryError,
    UnhealthyMembersError,
)
from jujurestore.machine import controller_node_for_replica_set_member
from jujurestore.node import ControllerNode, ControllerNodeConverter
from jujurestore.replicaset import PRIMARY, SECONDARY, Database, ReplicaSet, ReplicaSetMember

logger = logging.getLogger(__name__)

NodeAction = Callable[[ControllerNode], Awaitable[None]]


class Restorer:
    """Checks a controller cluster is safe to restore and manages its agents.

    A Restorer holds a single snapshot of the replica set taken when it
    was created. Build a new one to see a fresher topology.
    """

    def __init__(
        self,
        database: Database,
        replica_set: ReplicaSet,
        converter: ControllerNodeConverter = controller_node_for_replica_set_member,
    ) -> None:
        """Initialize restorer from an already fetched replica set.

        Args:
            database: Database the replica set was read from
            replica_set: Snapshot of the replica set topology
            converter: Maps each member to the node hosting it
        """
        self._database = database
        self._replica_set = replica_set
        self._nodes: tuple[tuple[ReplicaSetMember, ControllerNode], ...] = tuple(
            (member, converter(member)) for member in replica_set
        )
        self._primary: ReplicaSetMember | None = None
        self._self: ReplicaSetMember | None = None
        self._is_ha = False

        for member in replica_set:
            if member.is_primary and self._primary is None:
                self._primary = member
            if member.is_self and self._self is None:
                self._self = member

    @classmethod
    async def create(
        cls,
        database: Database,
        converter: ControllerNodeConverter = controller_node_for_replica_set_member,
    ) -> "Restorer":
        """Create a restorer from the database's current replica set."""
        try:
            replica_set = await database.replica_set()
        except Exception as e:
            raise DataSourceError(f"getting replica set: {e}") from e

        logger.debug("replica set snapshot has %d members", len(replica_set))
        return cls(database, replica_set, converter)

    @property
    def database(self) -> Database:
        """The database the snapshot came from; closing it is up to the caller."""
        return self._database

    @property
    def replica_set(self) -> ReplicaSet:
        return self._replica_set

    @property
    def nodes(self) -> tuple[ControllerNode, ...]:
        """Controller nodes, one per member, in replica set order."""
        return tuple(node for _, node in self._nodes)

    @property
    def primary(self) -> ReplicaSetMember | None:
        return self._primary

    @property
    def self_member(self) -> ReplicaSetMember | None:
        return self._self

    @property
    def is_ha(self) -> bool:
        """Whether the cluster has more than one member.

        Only meaningful after check_database_state has succeeded.
        """
        return self._is_ha

    def check_database_state(self) -> None:
        """Check the replica set is in a state that allows a restore.

        Raises UnhealthyMembersError, NoPrimaryFoundError or
        NotRunningOnPrimaryError.
        """
        unhealthy = [member for member in self._replica_set if _is_problematic(member)]
        if unhealthy:
            err = UnhealthyMembersError(unhealthy)
            logger.warning("%s", err)
            raise err

        if self._primary is None:
            logger.warning("no primary in replica set of %d members", len(self._replica_set))
            raise NoPrimaryFoundError()

        if self._self is not None and self._self != self._primary:
            logger.warning("running on %s, not on primary %s", self._self, self._primary)
            raise NotRunningOnPrimaryError(self._primary)

        self._is_ha = len(self._replica_set) > 1

    async def check_secondary_controller_nodes(self) -> dict[str, Exception | None]:
        """Ping every node except this one.

        Returns a mapping of node ip to the ping error, or None if the
        node is reachable.
        """
        targets = [node for member, node in self._nodes if not member.is_self]
        return await self._run_on_nodes(targets, lambda node: node.ping(), "ping")

    async def stop_agents(self, include_secondaries: bool) -> dict[str, Exception | None]:
        """Stop the machine agent on this node, and on the others if asked."""
        return await self._run_on_nodes(
            self._agent_targets(include_secondaries), lambda node: node.stop_agent(), "stop agent"
        )

    async def start_agents(self, include_secondaries: bool) -> dict[str, Exception | None]:
        """Start the machine agent on this node, and on the others if asked."""
        return await self._run_on_nodes(
            self._agent_targets(include_secondaries), lambda node: node.start_agent(), "start agent"
        )

    def _agent_targets(self, include_secondaries: bool) -> list[ControllerNode]:
        return [
            node for member, node in self._nodes if member.is_self or include_secondaries
        ]

    async def _run_on_nodes(
        self,
        nodes: list[ControllerNode],
        action: NodeAction,
        description: str,
    ) -> dict[str, Exception | None]:
        """Run action on every node concurrently, collecting each outcome.

        A failure on one node is recorded against its ip and doesn't stop
        the others.
        """

        async def run_one(node: ControllerNode) -> tuple[str, Exception | None]:
            ip = node.ip
            try:
                await action(node)
            except Exception as e:
                logger.warning("%s failed on %s: %s", description, ip, e)
                return ip, e
            return ip, None

        outcomes = await asyncio.gather(*(run_one(node) for node in nodes))

        results: dict[str, Exception | None] = {}
        for ip, err in outcomes:
            if ip in results:
                logger.warning("%s: more than one node has ip %s", description, ip)
                # Never let a success hide another node's failure.
                if results[ip] is not None:
                    continue
            results[ip] = err

        failed = sum(1 for err in results.values() if err is not None)
        logger.info("%s: %d nodes, %d failed", description, len(results), failed)
        return results


def _is_problematic(member: ReplicaSetMember) -> bool:
    # Members we can't map to a machine or classify are as bad as unhealthy ones.
    return (
        not member.healthy
        or member.state not in (PRIMARY, SECONDARY)
        or not member.juju_machine_id
    )
