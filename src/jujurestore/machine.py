"""Controller nodes managed over ssh."""

import asyncio
import contextlib
import logging

from jujurestore.config import Settings, get_settings
from jujurestore.exceptions import NodeCommandError
from jujurestore.node import ControllerNode
from jujurestore.replicaset import ReplicaSetMember

logger = logging.getLogger(__name__)


class Machine(ControllerNode):
    """A controller machine reached by running commands through ssh."""

    def __init__(
        self,
        ip: str,
        machine_id: str,
        *,
        settings: Settings | None = None,
    ) -> None:
        """Initialize machine (does not connect).

        Args:
            ip: Host name or address of the machine
            machine_id: Juju machine id, used to name the agent service
            settings: ssh settings; the process-wide settings, read on
                first use, when omitted
        """
        self._ip = ip
        self._machine_id = machine_id
        self._settings = settings

    @property
    def ip(self) -> str:
        return self._ip

    @property
    def settings(self) -> Settings:
        """ssh settings; invalid environment settings raise here, not in __init__."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def machine_id(self) -> str:
        return self._machine_id

    @property
    def agent_service(self) -> str:
        """Name of the systemd unit running the machine agent."""
        return f"{self.settings.agent_service_prefix}{self._machine_id}"

    def __repr__(self) -> str:
        return f"Machine(ip={self._ip!r}, machine_id={self._machine_id!r})"

    async def ping(self) -> None:
        await self._run("echo", "hi")

    async def stop_agent(self) -> None:
        await self._run("sudo", "systemctl", "stop", self.agent_service)

    async def start_agent(self) -> None:
        await self._run("sudo", "systemctl", "start", self.agent_service)

    def _ssh_command(self, *command: str) -> list[str]:
        """Build the full ssh invocation for a remote command."""
        settings = self.settings
        strict = "yes" if settings.ssh_strict_host_key_checking else "no"
        args = [
            "ssh",
            "-o",
            f"StrictHostKeyChecking={strict}",
            "-o",
            "BatchMode=yes",
        ]
        if settings.ssh_identity_file:
            args += ["-i", settings.ssh_identity_file]
        args += [f"{settings.ssh_user}@{self._ip}", "--", *command]
        return args

    async def _run(self, *command: str) -> str:
        """Run a command on the machine and return its stdout."""
        args = self._ssh_command(*command)
        logger.debug("running on %s: %s", self._ip, " ".join(command))

        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise NodeCommandError(self._ip, command, f"failed to run ssh: {e}") from e

        timeout = self.settings.command_timeout
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except TimeoutError as e:
            await _kill(proc)
            raise NodeCommandError(
                self._ip,
                command,
                f"{' '.join(command)!r} timed out after {timeout}s",
            ) from e
        except BaseException:
            # Cancelled by the caller; don't leave ssh running behind its back.
            await _kill(proc)
            raise

        if proc.returncode != 0:
            err = stderr.decode(errors="replace").strip()
            raise NodeCommandError(
                self._ip,
                command,
                f"{' '.join(command)!r} exited with code {proc.returncode}: {err}",
                exit_code=proc.returncode,
                stderr=err,
            )

        return stdout.decode(errors="replace")


async def _kill(proc: asyncio.subprocess.Process) -> None:
    """Kill a still-running process and reap it."""
    if proc.returncode is not None:
        return
    with contextlib.suppress(ProcessLookupError):
        proc.kill()
    await proc.wait()


def _host_from_member_name(name: str) -> str:
    """Strip an optional port (and IPv6 brackets) from a member name."""
    if name.startswith("["):
        host, _, _ = name[1:].partition("]")
        return host
    if name.count(":") == 1:
        host, _, _ = name.partition(":")
        return host
    return name


def controller_node_for_replica_set_member(member: ReplicaSetMember) -> ControllerNode:
    """Map a replica set member to the machine hosting it.

    Doesn't read settings or touch the network; both happen when the
    machine is first asked to run something.
    """
    return Machine(_host_from_member_name(member.name), member.juju_machine_id)
