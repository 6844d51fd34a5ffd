"""
Tests for the install use case — detect → dispatch → elevate → execute.
"""

from pathlib import Path

from installdeps.adapters.mock import MockAdapter
from installdeps.adapters.registry import AdapterRegistry
from installdeps.core.models.install import ErrorKind
from installdeps.core.services.detection import ARCH_MARKER, OS_RELEASE
from installdeps.core.use_cases.install import execute_plan, resolve_plan, run_install
from tests.fakes import FakeProbe, lsb


def _registry() -> tuple[AdapterRegistry, MockAdapter]:
    registry = AdapterRegistry()
    mock = MockAdapter(adapter_name="command")
    registry.register(mock)
    return registry, mock


class TestResolvePlan:
    def test_arch_non_root(self):
        result = resolve_plan(probe=FakeProbe(files={ARCH_MARKER: ""}), is_root=False)
        assert result.exit_code == 0
        assert result.action.platform == "Arch Linux"
        assert result.action.requires_elevation
        assert result.project == "cpp-ethereum"

    def test_root(self):
        result = resolve_plan(probe=FakeProbe(files={ARCH_MARKER: ""}), is_root=True)
        assert not result.action.requires_elevation

    def test_unsupported_exit_code(self):
        result = resolve_plan(probe=FakeProbe(kernel="FreeBSD"), is_root=True)
        assert result.unsupported.kind == ErrorKind.UNSUPPORTED_PLATFORM
        assert result.exit_code == 1

    def test_catalog_error(self, tmp_path: Path):
        result = resolve_plan(catalog_path=tmp_path / "missing.yml", probe=FakeProbe())
        assert result.error
        assert result.exit_code == 1
        assert result.to_dict() == {"error": result.error}

    def test_to_dict(self):
        result = resolve_plan(
            probe=FakeProbe(files={OS_RELEASE: 'NAME="Debian GNU/Linux"\n'}),
            is_root=False,
        )
        d = result.to_dict()
        assert d["signal"]["distro_source"] == "os-release"
        assert d["action"]["manager"] == "apt"
        assert d["is_root"] is False


class TestExecutePlan:
    def test_plan_resolved_before_execution(self):
        registry, mock = _registry()
        plan = resolve_plan(probe=FakeProbe(files={ARCH_MARKER: ""}), is_root=True)
        assert mock.call_count == 0

        result = execute_plan(plan, registry=registry)
        assert result.exit_code == 0
        assert result.action is plan.action
        assert mock.call_count == 1

    def test_progress_forwarded(self):
        registry, _ = _registry()
        plan = resolve_plan(probe=FakeProbe(files={ARCH_MARKER: ""}), is_root=True)
        seen = []
        execute_plan(
            plan,
            registry=registry,
            on_progress=lambda step, receipt: seen.append((step.id, receipt is None)),
        )
        assert seen == [("pacman:install", True), ("pacman:install", False)]

    def test_unsupported_has_no_report(self):
        registry, mock = _registry()
        plan = resolve_plan(probe=FakeProbe(kernel="FreeBSD"), is_root=True)
        result = execute_plan(plan, registry=registry)
        assert result.report is None
        assert result.exit_code == 1
        assert mock.call_count == 0

    def test_catalog_error_passes_through(self, tmp_path: Path):
        plan = resolve_plan(catalog_path=tmp_path / "missing.yml", probe=FakeProbe())
        result = execute_plan(plan)
        assert result.error == plan.error
        assert result.exit_code == 1


class TestRunInstall:
    def test_supported_runs_steps(self):
        registry, mock = _registry()
        result = run_install(
            probe=FakeProbe(commands=lsb("Ubuntu", "xenial")),
            is_root=True,
            registry=registry,
        )
        assert result.exit_code == 0
        assert [c.step.kind for c in mock.call_log] == [
            "append_source", "refresh_index", "install",
        ]

    def test_unsupported_never_executes(self):
        registry, mock = _registry()
        result = run_install(
            probe=FakeProbe(commands=lsb("Ubuntu", "hypothetical")),
            is_root=True,
            registry=registry,
        )
        assert result.exit_code == 1
        assert result.report is None
        assert mock.call_count == 0

    def test_failed_step_exit_code(self):
        registry, mock = _registry()
        mock.set_failure("pacman:install")
        result = run_install(
            probe=FakeProbe(files={ARCH_MARKER: ""}),
            is_root=True,
            registry=registry,
        )
        assert result.exit_code == 1
        assert result.report.status == "failed"

    def test_missing_brew(self):
        result = run_install(
            probe=FakeProbe(kernel="Darwin", mac_version="10.10.5"),
            is_root=False,
        )
        assert result.unsupported.kind == ErrorKind.MISSING_PREREQUISITE_TOOL
        assert result.exit_code == 1

    def test_mock_mode(self):
        result = run_install(
            probe=FakeProbe(files={OS_RELEASE: "NAME=Fedora\n"}),
            is_root=False,
            mock_mode=True,
        )
        assert result.exit_code == 0
        assert result.report.succeeded == 1
        assert result.to_dict()["mock"] is True

    def test_dry_run(self):
        result = run_install(
            probe=FakeProbe(files={ARCH_MARKER: ""}),
            is_root=False,
            dry_run=True,
        )
        assert result.exit_code == 0
        assert result.report.skipped == 1
        assert result.to_dict()["report"]["receipts"][0]["status"] == "skipped"
