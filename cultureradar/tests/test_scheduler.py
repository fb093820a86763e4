from unittest.mock import patch

import pytest

from cultureradar.config.ingestion import IngestionConfig
from cultureradar.services import scheduler as scheduler_module
from cultureradar.services.ingestion import IngestionReport


@pytest.fixture(autouse=True)
def stop_scheduler():
    yield
    scheduler_module.shutdown_scheduler()


def test_disabled_ingestion_starts_nothing():
    assert scheduler_module.init_scheduler(IngestionConfig()) is None
    assert scheduler_module.get_scheduler() is None


def test_ingestion_job_is_scheduled(monkeypatch):
    monkeypatch.setenv('INGESTION_ENABLED', 'true')

    started = scheduler_module.init_scheduler(IngestionConfig(interval_hours=3))

    assert started is scheduler_module.get_scheduler()
    assert started.running
    job = started.get_job(scheduler_module.INGESTION_JOB_ID)
    assert job.trigger.interval.total_seconds() == 3 * 3600
    assert job.max_instances == 1

    # A second call returns the running instance
    assert scheduler_module.init_scheduler(IngestionConfig(interval_hours=3)) is started

    scheduler_module.shutdown_scheduler()
    assert scheduler_module.get_scheduler() is None


def test_invalid_interval_is_rejected(monkeypatch):
    monkeypatch.setenv('INGESTION_ENABLED', 'true')
    with pytest.raises(ValueError):
        scheduler_module.init_scheduler(IngestionConfig(interval_hours=-1))


def test_scheduled_job_runs_a_full_pass():
    with patch.object(scheduler_module, 'run_ingestion', return_value=IngestionReport()) as mock_run:
        scheduler_module.scheduled_ingestion()
    mock_run.assert_called_once_with()
