"""
Tests for engine executor — ordered execution and halt-on-failure.
"""

from installdeps.adapters.mock import MockAdapter
from installdeps.adapters.registry import AdapterRegistry
from installdeps.core.engine.executor import (
    ExecutionReport,
    execute_action,
    generate_operation_id,
)
from installdeps.core.models.action import Receipt
from installdeps.core.models.platform import PlatformSignal
from installdeps.core.services.dispatch import dispatch
from installdeps.core.services.elevation import apply_elevation


def _trusty(catalog, travis: bool = False):
    signal = PlatformSignal(
        kernel_name="Linux",
        distro_id="Ubuntu",
        distro_codename="trusty",
        distro_source="lsb_release",
        env_flags=frozenset({"TRAVIS"}) if travis else frozenset(),
    )
    return apply_elevation(dispatch(signal, catalog), is_root=False)


def _registry() -> tuple[AdapterRegistry, MockAdapter]:
    registry = AdapterRegistry()
    mock = MockAdapter(adapter_name="command")
    registry.register(mock)
    return registry, mock


class TestExecuteAction:
    def test_runs_all_steps_in_order(self, catalog):
        registry, mock = _registry()
        report = execute_action(_trusty(catalog), registry)
        assert report.status == "ok"
        assert [c.step.id for c in mock.call_log] == [
            "apt:append_source:0",
            "apt:refresh_index",
            "apt:install",
        ]
        assert report.not_run == []

    def test_steps_reach_adapter_elevated(self, catalog):
        registry, mock = _registry()
        execute_action(_trusty(catalog), registry)
        assert all(c.step.argv[0] == "sudo" for c in mock.call_log)

    def test_halts_on_first_failure(self, catalog):
        registry, mock = _registry()
        mock.set_failure("apt:refresh_index", error="apt is locked")
        report = execute_action(_trusty(catalog, travis=True), registry)

        assert mock.call_count == 3
        assert report.status == "partial"
        assert report.failed == 1
        assert report.not_run == ["apt:install"]
        assert report.failed_receipt.error == "apt is locked"

    def test_first_step_failure(self, catalog):
        registry, mock = _registry()
        mock.set_failure("apt:append_source:0")
        report = execute_action(_trusty(catalog), registry)
        assert report.status == "failed"
        assert report.not_run == ["apt:refresh_index", "apt:install"]

    def test_dry_run_runs_nothing(self, catalog):
        registry, mock = _registry()
        report = execute_action(_trusty(catalog), registry, dry_run=True)
        assert mock.call_count == 0
        assert report.skipped == 3
        assert report.all_ok

    def test_progress_announces_each_step_before_it_runs(self, catalog):
        registry, mock = _registry()
        events = []

        def on_progress(step, receipt):
            events.append((step.id, receipt.status if receipt else "started", mock.call_count))

        execute_action(_trusty(catalog), registry, on_progress=on_progress)
        assert events == [
            ("apt:append_source:0", "started", 0),
            ("apt:append_source:0", "ok", 1),
            ("apt:refresh_index", "started", 1),
            ("apt:refresh_index", "ok", 2),
            ("apt:install", "started", 2),
            ("apt:install", "ok", 3),
        ]

    def test_progress_stops_at_failure(self, catalog):
        registry, mock = _registry()
        mock.set_failure("apt:refresh_index")
        seen = []
        execute_action(
            _trusty(catalog), registry,
            on_progress=lambda step, receipt: seen.append(step.id),
        )
        assert "apt:install" not in seen

    def test_operation_id(self, catalog):
        registry, _ = _registry()
        report = execute_action(_trusty(catalog), registry, operation_id="op-test")
        assert report.operation_id == "op-test"
        assert report.platform == "Ubuntu Trusty Tahr (14.04)"


class TestExecutionReport:
    def test_empty(self):
        report = ExecutionReport()
        assert report.status == "ok"
        assert report.failed_receipt is None

    def test_all_failed(self):
        report = ExecutionReport(receipts=[
            Receipt.failure(adapter="command", step_id="a", error="x"),
        ])
        assert report.status == "failed"

    def test_to_dict(self):
        report = ExecutionReport(
            operation_id="op-1",
            receipts=[Receipt.success(adapter="command", step_id="a")],
            not_run=["b"],
        )
        d = report.to_dict()
        assert d["succeeded"] == 1
        assert d["not_run"] == ["b"]
        assert d["receipts"][0]["step_id"] == "a"


class TestOperationId:
    def test_format(self):
        op = generate_operation_id()
        assert op.startswith("op-")

    def test_unique(self):
        assert generate_operation_id() != generate_operation_id()
