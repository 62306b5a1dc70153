from pathlib import Path

import pytest

from esg_scoring.data_collection.data_pipeline import load_config
from esg_scoring.data_collection.metric_store import MetricStore

PROJECT_ROOT = Path(__file__).resolve().parent.parent
CONFIG_PATH = PROJECT_ROOT / "config" / "scoring_config.yaml"


@pytest.fixture
def config():
    """The shipped scoring configuration."""
    return load_config(CONFIG_PATH)


@pytest.fixture
def metric_rows():
    return [
        {"company_id": "acme", "metric_name": "scope1Emissions", "value": 9000, "period": 2021},
        {"company_id": "acme", "metric_name": "scope1Emissions", "value": 10500, "period": 2022},
        {"company_id": "acme", "metric_name": "scope1Emissions", "value": 12000, "period": 2023},
        {"company_id": "acme", "metric_name": "scope2Emissions", "value": 4000, "period": 2022},
        {"company_id": "acme", "metric_name": "scope2Emissions", "value": 6000, "period": 2023},
        {"company_id": "acme", "metric_name": "scope3Emissions", "value": 30000, "period": 2023},
        {"company_id": "acme", "metric_name": "waterWithdrawal", "value": 150000, "period": 2023},
        {"company_id": "acme", "metric_name": "femaleEmployeesPercentage", "value": 18, "period": 2023},
        {"company_id": "acme", "metric_name": "totalEmployees", "value": 2400, "period": 2023},
        {"company_id": "borealis", "metric_name": "scope1Emissions", "value": 3000, "period": 2023},
        {"company_id": "borealis", "metric_name": "dataBreachIncidents", "value": 1, "period": 2023},
        {"company_id": "borealis", "metric_name": "independentDirectorsPercentage", "value": 25, "period": 2023},
    ]


@pytest.fixture
def store(metric_rows):
    return MetricStore.from_records(metric_rows)
