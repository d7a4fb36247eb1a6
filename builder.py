"""
builder.py - Runs the Elm compiler whenever the source file changes.

The compiler runs as a child process on the event loop, so serving and
watching carry on while a build is in flight. Overlapping builds either run
side by side (CONCURRENT, the default) or queue behind each other
(SERIALIZE); a debounce window can fold a burst of change events into one
build.
"""

import asyncio
import enum
import logging
import os
import shlex
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from livereload.watcher import Watcher
from tornado.ioloop import PeriodicCallback

logger = logging.getLogger(__name__)

# Milliseconds between source polls, livereload's own polling cadence
POLL_INTERVAL = 800


class OverlapPolicy(str, enum.Enum):
    CONCURRENT = "concurrent"
    SERIALIZE = "serialize"


@dataclass
class BuildResult:
    argv: list
    returncode: Optional[int]
    stdout: str = ''
    stderr: str = ''
    error: Optional[str] = None

    @property
    def ok(self):
        return self.returncode == 0


def build_command(compiler: Union[str, Sequence[str]], source, artifact) -> list:
    """
    Build the argv for ``<compiler> <source> --output <artifact>``.

    Args:
        compiler: command prefix, e.g. "elm make" or ["elm", "make"]
        source: file to compile
        artifact: where the compiler writes its output
    """
    if isinstance(compiler, str):
        prefix = shlex.split(compiler)
    else:
        prefix = list(compiler)
    return prefix + [str(source), '--output', str(artifact)]


async def run_build(argv) -> BuildResult:
    """Run one compiler process to completion and report how it went."""
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        return BuildResult(argv=list(argv), returncode=None, error=str(e))

    out, err = await proc.communicate()
    return BuildResult(
        argv=list(argv),
        returncode=proc.returncode,
        stdout=out.decode('utf-8', errors='replace'),
        stderr=err.decode('utf-8', errors='replace'),
    )


class BuildTrigger:
    """
    Starts a build on every trigger() call.

    trigger() must be called from inside the running event loop: the
    source poller and IOLoop callbacks both satisfy that.
    """

    def __init__(self, source, artifact, compiler="elm make",
                 policy=OverlapPolicy.CONCURRENT, debounce=0.0):
        self.source = source
        self.artifact = artifact
        self.argv = build_command(compiler, source, artifact)
        self.policy = OverlapPolicy(policy)
        self.debounce = debounce
        self.builds_started = 0
        self._tasks = set()
        self._pending = None
        self._lock = asyncio.Lock()
        self.watcher = None
        self._poller = None

    @property
    def in_flight(self):
        return len(self._tasks)

    def attach(self, interval=POLL_INTERVAL):
        """
        Poll the source on the current IOLoop and trigger a build when it changes.

        The source gets its own watcher, separate from the livereload server,
        so saving it never reloads browsers; the artifact watch does that once
        the build lands.
        """
        self.watcher = Watcher()
        self.watcher.watch(str(self.source), self.trigger)
        self._poller = PeriodicCallback(self.watcher.examine, interval)
        self._poller.start()
        return self._poller

    def detach(self):
        if self._poller is not None:
            self._poller.stop()
            self._poller = None

    def trigger(self):
        loop = asyncio.get_running_loop()
        if self.debounce > 0:
            if self._pending is not None:
                self._pending.cancel()
            self._pending = loop.call_later(self.debounce, self._start)
        else:
            self._start()

    def _start(self):
        self._pending = None
        self.builds_started += 1
        logger.info("Building %s", os.path.basename(self.source))
        task = asyncio.get_running_loop().create_task(self._build())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _build(self):
        if self.policy is OverlapPolicy.SERIALIZE:
            async with self._lock:
                result = await run_build(self.argv)
        else:
            result = await run_build(self.argv)
        self._report(result)
        return result

    def _report(self, result):
        if not result.ok:
            logger.debug("Build failed (%s): %s", result.returncode,
                         result.error or result.stderr.strip())
            return
        logger.info("%s", result.stdout.rstrip())

    async def drain(self):
        """Wait for every build started so far, including debounced ones."""
        while self._tasks or self._pending is not None:
            if self._tasks:
                await asyncio.gather(*list(self._tasks))
            else:
                await asyncio.sleep(self.debounce)
