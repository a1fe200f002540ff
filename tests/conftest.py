from datetime import datetime, timezone

import pytest

from job_scanner.config import ScanConfig
from job_scanner.models import JobRecord

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
SCRAPED_AT = NOW.isoformat()


def make_job(**overrides) -> JobRecord:
    """A record that passes the default config unless overridden."""
    fields = {
        "id": "1",
        "source": "test",
        "source_id": "1",
        "title": "Senior Engineer",
        "company": "Acme",
        "location": "Remote",
        "is_remote": True,
        "remote_region": "Worldwide",
        "seniority": "Senior",
        "tech_tags": [],
        "description_text": "",
        "apply_url": "https://example.com/apply",
        "posted_at": None,
        "scraped_at": SCRAPED_AT,
        "raw": {},
    }
    fields.update(overrides)
    return JobRecord(**fields)


@pytest.fixture
def job_factory():
    return make_job


@pytest.fixture
def config() -> ScanConfig:
    return ScanConfig()
