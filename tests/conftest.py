"""Shared test configuration for reversible access setter tests.

Provides:
- Registries for both active scopes
- A structured diagnostic sink
- Isolation from user level configuration (~/.ras, RAS_* variables)
"""

from collections.abc import Iterator
from pathlib import Path

import pytest

from access_setter.engine import ApplicationEngine, DiagnosticLog, RuleRegistry, Scope


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep user configuration and environment overrides out of every test."""
    monkeypatch.delenv("RAS_CONFIG", raising=False)
    monkeypatch.delenv("RAS_ACTIVE_SCOPE", raising=False)
    monkeypatch.delenv("RAS_FORCE_SILENT", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    yield


@pytest.fixture
def diagnostics() -> DiagnosticLog:
    return DiagnosticLog()


@pytest.fixture
def runtime_registry(diagnostics: DiagnosticLog) -> RuleRegistry:
    """Registry active at runtime, recording diagnostics."""
    return RuleRegistry(Scope.RUNTIME, diagnostics=diagnostics)


@pytest.fixture
def build_registry(diagnostics: DiagnosticLog) -> RuleRegistry:
    """Registry active at build time, recording diagnostics."""
    return RuleRegistry(Scope.BUILD, diagnostics=diagnostics)


@pytest.fixture
def engine(runtime_registry: RuleRegistry) -> ApplicationEngine:
    return ApplicationEngine(runtime_registry)
