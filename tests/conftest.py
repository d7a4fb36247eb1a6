"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import tempfile
import time
from pathlib import Path

import pytest

# Stand-in for `elm make`: <delay> <source> --output <artifact>
FAKE_COMPILER = """\
import os, sys, time
delay = float(sys.argv[1])
source, artifact = sys.argv[2], sys.argv[4]
log = os.path.join(os.path.dirname(artifact), "builds.log")
with open(log, "a") as f:
    f.write("start\\n")
time.sleep(delay)
with open(source) as f:
    body = f.read()
with open(artifact, "w") as f:
    f.write("// compiled\\n" + body)
with open(log, "a") as f:
    f.write("end\\n")
print("Success! Compiled 1 module.")
"""


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def elm_source(temp_dir: Path) -> Path:
    path = temp_dir / "Main.elm"
    path.write_text("module Main exposing (main)\n")
    # Old enough that a fresh watcher does not treat it as an edit
    stamp = time.time() - 60
    os.utime(path, (stamp, stamp))
    return path


@pytest.fixture
def edit():
    """Return a function that rewrites a file and moves its mtime forward."""

    def rewrite(path: Path, text: str) -> None:
        path.write_text(text)
        stamp = time.time() + 1
        os.utime(path, (stamp, stamp))

    return rewrite


@pytest.fixture
def elm_output(temp_dir: Path) -> Path:
    return temp_dir / "elm.js"


@pytest.fixture
def build_log(temp_dir: Path) -> Path:
    return temp_dir / "builds.log"


@pytest.fixture
def fake_compiler(temp_dir: Path):
    """Return a factory for compiler argv prefixes that sleep ``delay`` seconds."""
    script = temp_dir / "fake_elm.py"
    script.write_text(FAKE_COMPILER)

    def make(delay: float = 0.0) -> list[str]:
        return [sys.executable, str(script), str(delay)]

    return make


@pytest.fixture
def failing_compiler() -> list[str]:
    return [sys.executable, "-c", "import sys; sys.exit(1)"]
