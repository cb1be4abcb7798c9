"""
Shared test fixtures and helpers for the lineage test suite.
"""

import pytest

from lineage.config import LineageConfig
from lineage.diagnostics import Diagnostics, RecordingDiagnosticListener
from lineage.factory import Factory
from lineage.hooks import HookRegistry
from lineage.plugins import register_builtin_hooks


# ============================================================================
# Factory Fixtures
# ============================================================================


@pytest.fixture
def registry():
    """Fresh registry with the built-in hooks, isolated from the process-wide one."""
    reg = HookRegistry()
    register_builtin_hooks(reg)
    return reg


@pytest.fixture
def config():
    return LineageConfig()


@pytest.fixture
def factory(registry, config):
    return Factory(registry=registry, config=config)


@pytest.fixture
def recorder():
    return RecordingDiagnosticListener()


@pytest.fixture
def diagnostics(recorder):
    diag = Diagnostics()
    diag.add_listener(recorder)
    return diag
