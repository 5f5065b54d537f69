"""
Unit tests for the manual pipeline trigger.
"""

from unittest.mock import patch

import pytest

from app import cli
from app.models.pipeline import PipelineResult, PipelineStatus


@pytest.fixture
def mock_pipeline():
    with patch("app.cli.run_release_pipeline") as mock, patch("app.cli.setup_logging"):
        yield mock


def test_main_runs_pipeline_for_ref(mock_pipeline):
    mock_pipeline.return_value = PipelineResult(status=PipelineStatus.SKIPPED, reference="refs/heads/master")

    assert cli.main(["--ref", "refs/heads/master"]) == 0

    notification, run_settings = mock_pipeline.call_args.args
    assert notification.reference == "refs/heads/master"
    assert notification.event.ref == "refs/heads/master"
    assert run_settings.push_enabled == cli.settings.push_enabled


def test_main_dry_run_and_keep_workspace(mock_pipeline):
    """Test flags override settings without touching the global instance."""
    mock_pipeline.return_value = PipelineResult(status=PipelineStatus.DRY_RUN, reference="refs/tags/v8.12.0")

    cli.main(["--ref", "refs/tags/v8.12.0", "--dry-run", "--keep-workspace"])

    run_settings = mock_pipeline.call_args.args[1]
    assert run_settings.push_enabled is False
    assert run_settings.cleanup_workspace is False
    assert run_settings is not cli.settings


def test_main_failure_exit_code(mock_pipeline):
    mock_pipeline.return_value = None

    assert cli.main(["--ref", "refs/tags/v8.12.0"]) == 1


def test_main_requires_ref():
    with pytest.raises(SystemExit):
        cli.main([])
