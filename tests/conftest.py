"""Shared test fixtures for openapi2proto.

Provides reusable fixtures for the split petstore spec on disk, fake
document loaders, isolated config environments, output state, and the CLI
runner. These fixtures are automatically discovered by pytest and available
to all test modules without explicit imports.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any, Optional

import pytest

from openapi2proto.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_dir(tmp_path: Path) -> Path:
    """Copy the split petstore spec (openapi.yaml + schemas.yaml + common.json) to tmp_path."""
    target = tmp_path / "petstore"
    shutil.copytree(FIXTURES_DIR / "petstore", target)
    return target


class FakeLoader:
    """In-memory document loader that records every call.

    Args:
        documents: Mapping of locator to the (already normalized) document.
    """

    def __init__(self, documents: dict[str, Any]) -> None:
        self.documents = documents
        self.calls: list[tuple[str, Optional[str]]] = []

    def __call__(self, locator: str, base_dir: Optional[str]) -> Any:  # noqa: ANN401
        from openapi2proto.exceptions import LoadError

        self.calls.append((locator, base_dir))
        if locator not in self.documents:
            raise LoadError(locator, "no such fake document")
        return self.documents[locator]

    def count(self, locator: str) -> int:
        return sum(1 for called, _ in self.calls if called == locator)


@pytest.fixture
def fake_loader():
    """Factory for :class:`FakeLoader` instances."""
    return FakeLoader


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_DATA_HOME into tmp_path, clears OPENAPI2PROTO_* environment
    variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("OPENAPI2PROTO_DIR", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the duration of a test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
