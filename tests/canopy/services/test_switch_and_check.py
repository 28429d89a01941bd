from __future__ import annotations

from canopy.services import (
    CheckConnectionsService,
    ServiceFailure,
    ServiceSuccess,
    SwitchBranchRequest,
    SwitchBranchService,
)
from canopy.services.result import service_success
from tests.canopy.helpers import FakeVersionControl, failure


class TestSwitchBranch:
    def test_checks_out_existing_branch(self) -> None:
        vcs = FakeVersionControl(branches=["main", "feature/A-1"])

        result = SwitchBranchService(version_control=vcs).run(
            SwitchBranchRequest(ticket_key="A-1", prefix="feature/")
        )

        assert isinstance(result, ServiceSuccess)
        assert result.outcome.branch_name == "feature/A-1"
        assert vcs.current == "feature/A-1"

    def test_missing_branch_is_not_found(self) -> None:
        vcs = FakeVersionControl()

        result = SwitchBranchService(version_control=vcs).run(
            SwitchBranchRequest(ticket_key="A-1", prefix="feature/")
        )

        assert isinstance(result, ServiceFailure)
        assert result.code == "not_found"
        assert "checkout" not in vcs.operations()

    def test_checkout_failure_is_returned(self) -> None:
        vcs = FakeVersionControl(
            branches=["feature/A-1"], failures={"checkout": failure("dirty tree")}
        )

        result = SwitchBranchService(version_control=vcs).run(
            SwitchBranchRequest(ticket_key="A-1", prefix="feature/")
        )

        assert isinstance(result, ServiceFailure)
        assert result.message == "dirty tree"


class TestCheckConnections:
    def test_reports_every_probe(self) -> None:
        calls: list[str] = []

        def jira_probe():
            calls.append("jira")
            return failure("Authentication failed")

        def azure_probe():
            calls.append("azure")
            return service_success("Connection successful")

        result = CheckConnectionsService(
            probes=[("JIRA", jira_probe), ("Azure DevOps", azure_probe)]
        ).run()

        assert isinstance(result, ServiceSuccess)
        assert calls == ["jira", "azure"]
        checks = result.outcome.checks
        assert [(check.name, check.ok, check.message) for check in checks] == [
            ("JIRA", False, "Authentication failed"),
            ("Azure DevOps", True, "Connection successful"),
        ]
        assert not result.outcome.all_ok

    def test_no_probes_is_all_ok(self) -> None:
        result = CheckConnectionsService(probes=[]).run()

        assert isinstance(result, ServiceSuccess)
        assert result.outcome.all_ok
