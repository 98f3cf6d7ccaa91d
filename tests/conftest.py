"""Shared test fixtures for liveresolve.

Provides reusable fixtures for building live-apply errors, creating isolated
config environments, managing output state, and running CLI commands.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Callable

import pytest

from liveresolve.live.errors import TaskTimeoutError
from liveresolve.models import GroupKind, ObjMetadata, TimedOutResource
from liveresolve.output import reset_output
from liveresolve.resolver import ResolverRegistry, build_registry


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which go stale once a CliRunner or capsys redirect ends.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


@pytest.fixture
def wrap() -> Callable[[BaseException], RuntimeError]:
    """Return a function that wraps an error the way a caller deep in an apply would."""

    def _wrap(err: BaseException) -> RuntimeError:
        try:
            raise RuntimeError("apply failed") from err
        except RuntimeError as outer:
            return outer

    return _wrap


@pytest.fixture
def timeout_error() -> TaskTimeoutError:
    """A 30s wait on five Deployments where the first two never became Current."""
    kind = GroupKind(group="apps", kind="Deployment")
    identifiers = [
        ObjMetadata(namespace="default", name=f"app-{i}", group_kind=kind)
        for i in range(5)
    ]
    return TaskTimeoutError(
        timeout=timedelta(seconds=30),
        identifiers=identifiers,
        condition="Current",
        timed_out_resources=[
            TimedOutResource(identifier=identifiers[0], status="InProgress", message="Replicas: 0/1"),
            TimedOutResource(identifier=identifiers[1], status="Failed", message="ImagePullBackOff"),
        ],
    )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> ResolverRegistry:
    """The sealed built-in registry, without entry-point discovery."""
    return build_registry()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME at ``tmp_path/config``, clears all LIVERESOLVE_*
    environment variables, forces the XDG code path, and changes the working
    directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr("liveresolve.config._is_xdg_platform", lambda: True)
    for var in ["LIVERESOLVE_FORMAT", "LIVERESOLVE_LOG_LEVEL"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
