"""Tests for dispatch diagnostics."""

import pytest

from restmock import diagnostics
from restmock.config import MockConfig
from restmock.exceptions import RequestNotFound
from restmock.service import MockService


class TestDiagnosticsToggle:
    """Test the process-wide recording toggle."""

    def test_nothing_recorded_by_default(self, service):
        service.define("book")
        service.request("GET", "/books")
        assert len(service.diagnostics) == 0

    def test_enabled_toggle_records_paths_and_documents(self, service):
        service.define("book", lambda t: t.plain("name", "Dune"))
        service.create("book")
        diagnostics.enable()

        service.request("GET", "/books/1.xml")

        entry, = service.diagnostics.entries
        assert entry.verb == "GET"
        assert entry.path == "/books/1.xml"
        assert entry.route_kind == "default"
        assert entry.document == {"book": {"id": 1, "name": "Dune"}}

    def test_config_flag_records_without_toggle(self):
        service = MockService(MockConfig(diagnostics=True))
        service.register("GET", r"/ping", lambda: "pong")
        service.request("GET", "/ping")
        assert service.diagnostics.paths() == ["/ping"]

    def test_recording_has_no_behavioral_effect(self, service):
        service.register("GET", r"/ping", lambda: {"pong": True})
        quiet = service.request("GET", "/ping")
        diagnostics.enable()
        assert service.request("GET", "/ping") == quiet

    def test_failed_dispatch_is_not_recorded(self, service):
        diagnostics.enable()
        with pytest.raises(RequestNotFound):
            service.request("GET", "/unknown.xml")
        assert service.diagnostics.paths() == []

    def test_reset_clears_log(self, service):
        diagnostics.enable()
        service.register("GET", r"/ping", lambda: "pong")
        service.request("GET", "/ping")
        service.reset()
        assert len(service.diagnostics) == 0

    def test_entry_is_not_changed_by_later_edits_to_the_response(self, service):
        service.define("book", lambda t: t.plain("name", "Dune"))
        service.create("book")
        diagnostics.enable()

        response = service.dispatch("GET", "/books/1")
        response.document["book"]["name"] = "Changed"

        assert service.diagnostics.entries[0].document == {"book": {"id": 1, "name": "Dune"}}


class TestReport:
    """Test the end-of-scenario report."""

    def test_empty_report(self, service):
        assert service.diagnostics.report().strip() == "No requests dispatched."

    def test_report_lists_dispatches(self, service):
        diagnostics.enable()
        service.register("GET", r"/ping", lambda: {"pong": True})
        service.request("GET", "/ping")

        report = service.diagnostics.report()

        assert "1 request(s) dispatched:" in report
        assert "1. GET /ping [custom]" in report
        assert '"pong": true' in report

    def test_entry_serializes_with_pydantic(self, service):
        diagnostics.enable()
        service.register("GET", r"/ping", lambda: {"pong": True})
        service.request("GET", "/ping")

        dumped = service.diagnostics.entries[0].model_dump()

        assert dumped["path"] == "/ping"
        assert dumped["document"] == {"pong": True}
