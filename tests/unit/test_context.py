"""Tests for the processing context."""

import pytest

from sdensemble.engine.context import EnsembleContext, configure_logging


class TestEnsembleContext:
    """Run identifiers and stage timing."""

    def test_generated_run_id(self):
        context = EnsembleContext()
        assert context.run_id.startswith("ensemble_")

    def test_stage_timing(self):
        context = EnsembleContext(run_id="abc", threads=2, parallel=True)
        context.start_run()
        with context.time_stage("flatten"):
            pass
        assert context.end_run() >= 0.0

        metadata = context.get_runtime_metadata()
        assert metadata["run_id"] == "abc"
        assert metadata["threads"] == 2
        assert metadata["parallel"] is True
        assert "flatten" in metadata["stage_times"]

    def test_failed_stage_is_recorded(self):
        context = EnsembleContext(run_id="abc")
        with pytest.raises(RuntimeError):
            with context.time_stage("summarize"):
                raise RuntimeError("boom")
        assert "summarize" in context.get_runtime_metadata()["stage_times"]

    def test_end_without_start(self):
        assert EnsembleContext().end_run() == 0.0

    @pytest.mark.parametrize("json", [True, False])
    def test_configure_logging(self, json):
        configure_logging("DEBUG", json=json)
        EnsembleContext(run_id="log").logger.info("message", key=1)
