"""Tests for replica set topology."""

import dataclasses

import pytest

from jujurestore.replicaset import MemoryDatabase, ReplicaSet, ReplicaSetMember


class TestReplicaSetMember:
    def test_str(self) -> None:
        member = ReplicaSetMember(id=3, name="bibi", state="OUCHY", juju_machine_id="2")
        assert str(member) == '3 "bibi" (juju machine 2)'

    def test_is_primary(self) -> None:
        assert ReplicaSetMember(id=1, name="a", state="PRIMARY").is_primary
        assert not ReplicaSetMember(id=1, name="a", state="SECONDARY").is_primary

    def test_frozen(self) -> None:
        member = ReplicaSetMember(id=1, name="a", state="SECONDARY")
        with pytest.raises(dataclasses.FrozenInstanceError):
            member.healthy = True  # type: ignore[misc]


class TestReplicaSet:
    def test_list_stored_as_tuple(self) -> None:
        members = [
            ReplicaSetMember(id=1, name="a", state="PRIMARY"),
            ReplicaSetMember(id=2, name="b", state="SECONDARY"),
        ]
        replica_set = ReplicaSet(members)  # type: ignore[arg-type]
        members.clear()

        assert isinstance(replica_set.members, tuple)
        assert len(replica_set) == 2
        assert [m.name for m in replica_set] == ["a", "b"]

    def test_empty(self) -> None:
        assert len(ReplicaSet()) == 0


class TestMemoryDatabase:
    async def test_empty_database(self) -> None:
        db = MemoryDatabase()
        replica_set = await db.replica_set()
        assert replica_set == ReplicaSet()

    async def test_replica_set(self) -> None:
        member = ReplicaSetMember(id=1, name="a", state="PRIMARY")
        db = MemoryDatabase([member])

        replica_set = await db.replica_set()

        assert replica_set.members == (member,)

    async def test_close(self) -> None:
        db = MemoryDatabase()
        assert not db.is_closed

        await db.close()

        assert db.is_closed
