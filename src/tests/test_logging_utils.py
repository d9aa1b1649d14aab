"""
Tests for logging_utils module and the loggers the advisor modules use.
"""

import asyncio
import logging
import os
import sys

import pytest
from unittest.mock import AsyncMock, Mock, patch

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import llm
import main as cli
import workflow
from logging_utils import ROOT_LOGGER_NAME, LoggerAdapter, get_logger, set_verbose

BASE_ARGS = ["--geometry", "cylinder", "--velocity", "10", "--length", "0.1"]


@pytest.fixture
def quiet_after():
    """Put the advisor loggers back to INFO after the test."""
    yield
    set_verbose(False)


class TestModuleLoggers:
    """The advisor modules log under one hierarchy."""

    def test_module_logger_names(self):
        assert llm.logger.name == "convergence_advisor.llm"
        assert workflow.logger.name == "convergence_advisor.workflow"
        assert cli.logger.name == "convergence_advisor.main"

    def test_src_prefix_dropped(self):
        assert get_logger("src.llm") is llm.logger

    def test_single_handler(self):
        for name in ["a", "b", "c"]:
            get_logger(name)

        assert len(logging.getLogger(ROOT_LOGGER_NAME).handlers) == 1


class TestAdvisorLogging:
    """Records emitted along the assessment path."""

    def test_failed_assessment_warns(self, mock_llm_config, caplog):
        openai_client = Mock()
        openai_client.chat.completions.create = AsyncMock(side_effect=Exception("quota exceeded"))
        with patch('llm.AsyncOpenAI', return_value=openai_client):
            client = llm.AssessmentClient(mock_llm_config)

        with caplog.at_level(logging.WARNING, logger=ROOT_LOGGER_NAME):
            with pytest.raises(llm.AssessmentError):
                asyncio.run(client.submit("prompt"))

        record = next(r for r in caplog.records if r.name == "convergence_advisor.llm")
        assert record.levelno == logging.WARNING
        assert record.getMessage() == "Assessment request failed: quota exceeded"

    def test_submission_logs_reynolds_number(self, cylinder_setup, stub_client, caplog):
        session = workflow.AdvisorSession(stub_client, setup=cylinder_setup)

        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            asyncio.run(session.analyze())

        assert "Submitting setup (Re ~9.96e+5)" in caplog.text

    def test_incomplete_setup_logged_as_error(self, caplog):
        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            assert cli.main(BASE_ARGS + ["--turbulence", "Other", "--dry-run"]) == 1

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert errors[0].getMessage() == "Missing required fields: custom_turbulence_model"


class TestVerbose:
    """Tests for set_verbose and the CLI progress channel."""

    def test_set_verbose_toggles_debug(self, quiet_after):
        set_verbose(True)
        assert get_logger("units").isEnabledFor(logging.DEBUG)

        set_verbose(False)
        assert not get_logger("units").isEnabledFor(logging.DEBUG)

    def test_cli_verbose_reports_reynolds_number(self, quiet_after, caplog):
        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            cli.main(BASE_ARGS + ["--dry-run", "--verbose"])

        assert "Reynolds number: ~9.96e+5" in caplog.text

    def test_cli_quiet_by_default(self, caplog):
        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            cli.main(BASE_ARGS + ["--dry-run"])

        assert "Reynolds number:" not in caplog.text

    def test_adapter_silent_when_not_verbose(self, caplog):
        log = LoggerAdapter(get_logger("cli_quiet"), verbose=False)

        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            log("not shown")

        assert caplog.records == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
