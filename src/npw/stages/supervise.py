from __future__ import annotations

import asyncio
import logging
import os
import shlex
import signal
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Sequence, Union

from ..schemas.options import LauncherConfig

logger = logging.getLogger(__name__)

FORWARDED_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGQUIT)


@dataclass(frozen=True)
class Success:
    pass


@dataclass(frozen=True)
class ProcessExit:
    """The child ran but the invocation failed; ``code`` is what we exit with."""

    code: int
    interrupted: bool = False


ExitOutcome = Union[Success, ProcessExit]


class SignalSubscription:
    """Route SIGINT/SIGTERM/SIGQUIT to ``callback`` on the running loop while entered.

    Leaving the block removes the loop handlers and puts back whatever
    Python-level handler was installed before.
    """

    def __init__(self, callback: Callable[[int], None], signals: Sequence[int] = FORWARDED_SIGNALS):
        self._callback = callback
        self._signals = tuple(signals)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._previous: dict[int, object] = {}

    def __enter__(self) -> SignalSubscription:
        self._loop = asyncio.get_running_loop()
        try:
            for sig in self._signals:
                self._previous[sig] = signal.getsignal(sig)
                self._loop.add_signal_handler(sig, self._callback, sig)
        except BaseException:
            self._release()
            raise
        return self

    def __exit__(self, *exc) -> None:
        self._release()

    def _release(self) -> None:
        loop, previous = self._loop, self._previous
        self._loop, self._previous = None, {}
        if loop is None:
            return
        for sig, handler in previous.items():
            loop.remove_signal_handler(sig)
            # None means the handler was not installed from Python; leave the loop's reset alone.
            if handler is not None:
                signal.signal(sig, handler)


def returncode_to_exit(returncode: int) -> int:
    # asyncio reports death-by-signal as -signum; shells report 128 + signum.
    if returncode < 0:
        return 128 - returncode
    return returncode


class Supervisor:
    """Run one child command and relay termination signals to it until it exits."""

    def __init__(
        self,
        command: str,
        args: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        shell: str | None = None,
        interrupt_exit_code: int = 2,
    ):
        self.command = command
        self.args = list(args)
        self.cwd = Path(cwd)
        self.env = dict(os.environ if env is None else env)
        self.shell = shell
        self.interrupt_exit_code = interrupt_exit_code
        self._child: asyncio.subprocess.Process | None = None
        self._override: int | None = None
        # Signals that arrived while the child was still being spawned.
        self._pending: list[int] = []

    @property
    def interrupted(self) -> bool:
        return self._override is not None

    def _argv(self) -> list[str]:
        if self.shell is None:
            return [self.command, *self.args]
        return [self.shell, "-c", shlex.join([self.command, *self.args])]

    def _forward(self, child: asyncio.subprocess.Process, sig: int) -> None:
        logger.debug("Forwarding %s to pid %d", signal.Signals(sig).name, child.pid)
        try:
            child.send_signal(sig)
        except ProcessLookupError:
            pass

    def _on_signal(self, sig: int) -> None:
        child = self._child
        if child is not None:
            self._forward(child, sig)
        else:
            self._pending.append(sig)
        self._override = self.interrupt_exit_code

    async def run(self) -> ExitOutcome:
        """Spawn the child and wait for it.

        Raises OSError if the child cannot be started at all.
        """
        argv = self._argv()
        with SignalSubscription(self._on_signal):
            self._child = await asyncio.create_subprocess_exec(*argv, cwd=str(self.cwd), env=self.env)
            logger.debug("Spawned pid %d: %s", self._child.pid, argv)
            pending, self._pending = self._pending, []
            for sig in pending:
                self._forward(self._child, sig)
            try:
                returncode = await self._child.wait()
            finally:
                self._child = None

        logger.debug("Child exited with %d", returncode)
        if self._override is not None:
            return ProcessExit(self._override, interrupted=True)
        if returncode != 0:
            return ProcessExit(returncode_to_exit(returncode))
        return Success()


def run_supervised(
    command: str,
    argv: Sequence[str],
    *,
    cwd: Path,
    env: Mapping[str, str] | None = None,
    shell: str | None = None,
    config: LauncherConfig | None = None,
) -> ExitOutcome:
    cfg = config or LauncherConfig()
    supervisor = Supervisor(
        command,
        argv,
        cwd=cwd,
        env=env,
        shell=cfg.resolve_shell(shell),
        interrupt_exit_code=cfg.interrupt_exit_code,
    )
    return asyncio.run(supervisor.run())
