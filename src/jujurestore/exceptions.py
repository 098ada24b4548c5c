"""Exceptions for juju-restore."""

from collections.abc import Sequence

from jujurestore.replicaset import ReplicaSetMember


class RestoreError(Exception):
    """Base exception for juju-restore errors."""

    pass


class DataSourceError(RestoreError):
    """Error fetching replica set state from the database."""

    pass


class UnhealthyMembersError(RestoreError):
    """One or more replica set members can't be trusted for a restore."""

    members: tuple[ReplicaSetMember, ...]

    def __init__(self, members: Sequence[ReplicaSetMember]) -> None:
        self.members = tuple(members)
        described = ", ".join(str(member) for member in self.members)
        super().__init__(f"unhealthy replica set members: {described}")


class NoPrimaryFoundError(RestoreError):
    """No member of the replica set reports itself as primary."""

    def __init__(self) -> None:
        super().__init__("no primary found in replica set")


class NotRunningOnPrimaryError(RestoreError):
    """The restore is running on a member that isn't the primary."""

    primary: ReplicaSetMember

    def __init__(self, primary: ReplicaSetMember) -> None:
        self.primary = primary
        super().__init__(f"not running on primary replica set member, primary is {primary}")


class NodeCommandError(RestoreError):
    """Remote command on a controller node failed."""

    ip: str
    command: tuple[str, ...]
    exit_code: int | None
    stderr: str

    def __init__(
        self,
        ip: str,
        command: Sequence[str],
        message: str,
        *,
        exit_code: int | None = None,
        stderr: str = "",
    ) -> None:
        self.ip = ip
        self.command = tuple(command)
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(f"{ip}: {message}")


def is_unhealthy_members_error(err: BaseException | None) -> bool:
    """Report whether err is an UnhealthyMembersError."""
    return isinstance(err, UnhealthyMembersError)
