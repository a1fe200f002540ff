"""Tests for filter.py: rule order and one reason per rejected record."""

from datetime import timedelta

import pytest

from job_scanner.config import ScanConfig
from job_scanner.filter import filter_jobs

from tests.conftest import NOW

OLD = (NOW - timedelta(days=30)).isoformat()


def _reason(job, config):
    result = filter_jobs([job], config, now=NOW)
    return result.reasons.get(job.id)


def test_missing_salary_allowed_keeps_record(job_factory):
    config = ScanConfig(min_salary=80000, allow_missing_salary=True)
    job = job_factory(salary_min=None, salary_max=None)
    result = filter_jobs([job], config, now=NOW)
    assert result.kept == [job]
    assert job.id not in result.reasons


def test_missing_salary_disallowed_rejects_record(job_factory):
    config = ScanConfig(min_salary=80000, allow_missing_salary=False)
    job = job_factory(salary_min=None, salary_max=None)
    result = filter_jobs([job], config, now=NOW)
    assert result.kept == []
    assert result.reasons[job.id] == "missing_salary"


def test_salary_at_or_above_min_is_kept(job_factory):
    config = ScanConfig(min_salary=80000, allow_missing_salary=False)
    assert _reason(job_factory(salary_min=100000, salary_max=150000), config) is None
    assert _reason(job_factory(salary_min=80000), config) is None


def test_salary_below_min_uses_max_then_min(job_factory):
    config = ScanConfig(min_salary=200000)
    assert _reason(job_factory(salary_min=100000, salary_max=150000), config) == "salary_below_min"
    assert _reason(job_factory(salary_min=250000, salary_max=150000), config) == "salary_below_min"
    assert _reason(job_factory(salary_min=150000), config) == "salary_below_min"


def test_zero_min_salary_disables_salary_rule(job_factory):
    config = ScanConfig(min_salary=0, allow_missing_salary=False)
    assert _reason(job_factory(), config) is None


def test_excluded_company_matches_substring_either_direction(job_factory):
    config = ScanConfig(excluded_companies=["Acme"])
    assert _reason(job_factory(company="Acme Corp"), config) == "excluded_company"
    assert _reason(job_factory(company="acm"), config) == "excluded_company"
    assert _reason(job_factory(company="Globex"), config) is None
    assert _reason(job_factory(company=""), config) is None


def test_remote_only(job_factory):
    assert _reason(job_factory(is_remote=False), ScanConfig(remote_only=True)) == "not_remote"
    assert _reason(job_factory(is_remote=False), ScanConfig(remote_only=False)) is None


def test_region_not_allowed(job_factory):
    config = ScanConfig(allowed_regions=["EU", "Worldwide"])
    assert _reason(job_factory(remote_region="USA only"), config) == "region_not_allowed"
    assert _reason(job_factory(remote_region="EU timezones"), config) is None
    assert _reason(job_factory(remote_region=None), config) is None


def test_include_and_exclude_keywords(job_factory):
    config = ScanConfig(keywords_include=["React"], keywords_exclude=["wordpress"])
    assert _reason(job_factory(title="Senior Vue Engineer"), config) == "missing_keyword"
    assert _reason(job_factory(description_text="React and WordPress"), config) == "excluded_keyword"
    assert _reason(job_factory(description_text="React only"), config) is None


def test_required_tags(job_factory):
    config = ScanConfig(required_tags=["React"])
    assert _reason(job_factory(tech_tags=[]), config) == "missing_tag"
    assert _reason(job_factory(tech_tags=["vue"]), config) == "missing_tag"
    assert _reason(job_factory(tech_tags=["vue", "react"]), config) is None


def test_seniority_and_employment_type(job_factory):
    config = ScanConfig(seniority_allowed=["Senior"], employment_types_allowed=["Full-time"])
    assert _reason(job_factory(seniority="Junior"), config) == "seniority"
    assert _reason(job_factory(seniority=None), config) is None
    assert _reason(job_factory(employment_type="Contract"), config) == "employment_type"
    assert _reason(job_factory(employment_type="full-time"), config) is None
    assert _reason(job_factory(employment_type=None), config) is None


def test_posted_too_old(job_factory):
    config = ScanConfig(posted_within_days=7)
    old = (NOW - timedelta(days=8)).isoformat()
    recent = (NOW - timedelta(days=2)).isoformat()
    assert _reason(job_factory(posted_at=old), config) == "posted_too_old"
    assert _reason(job_factory(posted_at=recent), config) is None
    assert _reason(job_factory(posted_at=None), config) is None
    assert _reason(job_factory(posted_at=old), ScanConfig(posted_within_days=0)) is None


@pytest.mark.parametrize(
    "overrides, config_kwargs, expected",
    [
        # excluded company beats not remote
        ({"company": "Acme", "is_remote": False}, {"excluded_companies": ["acme"]}, "excluded_company"),
        # not remote beats missing keyword
        ({"is_remote": False}, {"keywords_include": ["python"]}, "not_remote"),
        # region beats missing keyword
        ({"remote_region": "LATAM"}, {"keywords_include": ["python"]}, "region_not_allowed"),
        # missing keyword beats missing tag
        ({"tech_tags": []}, {"keywords_include": ["python"], "required_tags": ["python"]}, "missing_keyword"),
        # excluded keyword beats missing tag
        (
            {"description_text": "WordPress theme work", "tech_tags": []},
            {"keywords_exclude": ["wordpress"], "required_tags": ["go"]},
            "excluded_keyword",
        ),
        # missing tag beats seniority
        ({"seniority": "Junior"}, {"required_tags": ["go"]}, "missing_tag"),
        # seniority beats salary
        ({"seniority": "Junior", "salary_max": 10}, {"min_salary": 100}, "seniority"),
        # employment type beats posting age
        (
            {"employment_type": "Contract", "posted_at": OLD},
            {"employment_types_allowed": ["Full-time"], "posted_within_days": 7},
            "employment_type",
        ),
        # posting age beats salary
        ({"posted_at": OLD, "salary_max": 10}, {"posted_within_days": 7, "min_salary": 100}, "posted_too_old"),
    ],
)
def test_first_failing_rule_wins(job_factory, overrides, config_kwargs, expected):
    assert _reason(job_factory(**overrides), ScanConfig(**config_kwargs)) == expected


def test_one_reason_per_rejected_record(job_factory):
    config = ScanConfig(excluded_companies=["acme"], keywords_include=["python"], min_salary=100, allow_missing_salary=False)
    jobs = [
        job_factory(id="a", company="Acme", is_remote=False),
        job_factory(id="b", company="Globex"),
        job_factory(id="c", company="Globex", title="Python Dev", salary_max=500),
    ]
    result = filter_jobs(jobs, config, now=NOW)
    assert result.reasons == {"a": "excluded_company", "b": "missing_keyword"}
    assert [j.id for j in result.kept] == ["c"]


def test_default_config_keeps_plain_remote_record(job_factory, config):
    assert filter_jobs([job_factory()], config, now=NOW).reasons == {}


def test_empty_input():
    result = filter_jobs([], ScanConfig(), now=NOW)
    assert result.kept == []
    assert result.reasons == {}
