"""Replica set topology and the database interface that reports it."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

PRIMARY = "PRIMARY"
SECONDARY = "SECONDARY"


@dataclass(frozen=True)
class ReplicaSetMember:
    """One member of the replica set, as reported by the database."""

    id: int
    name: str  # host, optionally with :port
    state: str
    healthy: bool = False
    is_self: bool = False
    juju_machine_id: str = ""

    @property
    def is_primary(self) -> bool:
        return self.state == PRIMARY

    def __str__(self) -> str:
        return f'{self.id} "{self.name}" (juju machine {self.juju_machine_id})'


@dataclass(frozen=True)
class ReplicaSet:
    """Replica set members in the order the database reported them."""

    members: tuple[ReplicaSetMember, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable but always store a tuple.
        object.__setattr__(self, "members", tuple(self.members))

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[ReplicaSetMember]:
        return iter(self.members)


class Database(ABC):
    """Abstract interface to the controller database."""

    @abstractmethod
    async def replica_set(self) -> ReplicaSet:
        """Get the current replica set topology."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""
        ...


class MemoryDatabase(Database):
    """In-memory database holding a fixed replica set."""

    def __init__(self, members: Iterable[ReplicaSetMember] | None = None) -> None:
        self._replica_set = ReplicaSet(tuple(members or ()))
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def replica_set(self) -> ReplicaSet:
        """Get the current replica set topology."""
        return self._replica_set

    async def close(self) -> None:
        """Mark the database closed."""
        self._closed = True
