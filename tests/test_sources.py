import json
from datetime import date, datetime, timezone

import pytest

from skills.search_analytics.sources.csv_source import load_csv_jobs
from skills.search_analytics.sources.json_source import load_json_export
from skills.search_analytics.sources.rows import inputs_from_payload, parse_timestamp
from skills.search_analytics.sources.sample_source import load_sample_inputs
from skills.search_analytics.types import ApplicationStatus


def _job_row(**overrides) -> dict:
    row = {
        "id": "job-1",
        "status": "Applied",
        "created_at": "2026-03-03T13:30:00Z",
        "industry": "Tech",
        "company_size": "Startup (1-50)",
        "job_type": "Full-time",
        "job_url": "https://www.linkedin.com/jobs/view/1",
        "job_description": "x" * 120,
        "notes": "",
        "salary_range_min": None,
        "salary_range_max": 150000,
        "location": "Remote",
    }
    row.update(overrides)
    return row


def test_job_row_maps_backend_columns():
    inputs = inputs_from_payload({"jobs": [_job_row()]})
    job = inputs.jobs[0]

    assert job.status is ApplicationStatus.APPLIED
    assert job.created_at == datetime(2026, 3, 3, 13, 30, tzinfo=timezone.utc)
    assert job.role_type == "Full-time"
    assert job.source_url == "https://www.linkedin.com/jobs/view/1"
    assert job.description_length == 120
    assert job.has_notes is False
    assert job.has_salary is True
    assert job.has_location is True
    assert inputs.warnings == []


def test_unknown_status_is_coerced_with_warning():
    inputs = inputs_from_payload({"jobs": [_job_row(status="Ghosted")]})

    assert inputs.jobs[0].status is ApplicationStatus.APPLIED
    assert len(inputs.warnings) == 1
    assert "Ghosted" in inputs.warnings[0]


def test_rows_without_timestamp_are_skipped():
    inputs = inputs_from_payload({"jobs": [_job_row(created_at=None), _job_row(id="job-2", created_at="not a date")]})

    assert inputs.jobs == []
    assert len(inputs.warnings) == 2


def test_missing_collections_mean_no_data():
    inputs = inputs_from_payload({})

    assert inputs.jobs == []
    assert inputs.interviews == []
    assert inputs.goals == []


def test_non_list_collection_is_rejected():
    with pytest.raises(ValueError):
        inputs_from_payload({"jobs": {"id": "job-1"}})
    with pytest.raises(ValueError):
        inputs_from_payload([])


def test_other_collections():
    inputs = inputs_from_payload(
        {
            "interviews": [{"id": "i1", "job_id": "job-1", "created_at": "2026-03-04", "interview_date": "2026-03-09T15:00:00"}],
            "status_history": [
                {"job_id": "job-1", "from_status": "Applied", "to_status": "Phone Screen", "changed_at": "2026-03-05T09:00:00Z"},
                {"job_id": "job-1", "from_status": "Applied", "to_status": "Vanished", "changed_at": "2026-03-05T09:00:00Z"},
            ],
            "application_packages": [{"id": "p1", "job_id": "job-1", "resume_id": "r1", "cover_letter_id": ""}],
            "goals": [
                {"id": "g1", "goal_type": "Interviews", "target_value": "5", "time_period": "weekly", "start_date": "2026-03-01"},
                {"id": "g2", "goal_type": "networking", "target_value": 3},
                {"id": "g3", "goal_type": "offers", "target_value": "lots", "is_active": "false"},
            ],
        }
    )

    assert inputs.interviews[0].scheduled_at == datetime(2026, 3, 9, 15, 0, tzinfo=timezone.utc)
    assert [h.to_status for h in inputs.status_history] == [ApplicationStatus.PHONE_SCREEN]
    assert inputs.application_packages[0].cover_letter_id is None
    assert [(g.id, g.goal_type, g.target_value) for g in inputs.goals] == [("g1", "interviews", 5.0), ("g3", "offers", 0.0)]
    assert inputs.goals[0].start_date == date(2026, 3, 1)
    assert inputs.goals[1].is_active is False
    assert len(inputs.warnings) == 3


def test_naive_timestamps_are_utc():
    assert parse_timestamp("2026-03-03T10:00:00") == datetime(2026, 3, 3, 10, 0, tzinfo=timezone.utc)
    assert parse_timestamp("") is None


def test_load_json_export(tmp_path):
    path = tmp_path / "export.json"
    path.write_text(json.dumps({"jobs": [_job_row()], "goals": []}), encoding="utf-8")

    inputs = load_json_export(str(path))

    assert len(inputs.jobs) == 1


def test_load_json_export_errors(tmp_path):
    with pytest.raises(ValueError):
        load_json_export(str(tmp_path / "missing.json"))

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_json_export(str(bad))


def test_load_csv_jobs(tmp_path):
    path = tmp_path / "jobs.csv"
    path.write_text(
        "id,status,created_at,industry,job_url,notes\n"
        "a,Rejected,2026-03-02T10:00:00Z,Finance,,called recruiter\n"
        "b,Accepted,2026-03-03T10:00:00Z,Finance,https://indeed.com/x,\n",
        encoding="utf-8",
    )

    inputs = load_csv_jobs(str(path))

    assert [j.status for j in inputs.jobs] == [ApplicationStatus.REJECTED, ApplicationStatus.ACCEPTED]
    assert inputs.jobs[0].source_url is None
    assert inputs.jobs[0].has_notes is True
    assert inputs.interviews == []


def test_sample_source_is_deterministic():
    first = load_sample_inputs(date(2026, 2, 1), date(2026, 3, 1))
    second = load_sample_inputs(date(2026, 2, 1), date(2026, 3, 1))

    assert first == second
    assert len(first.jobs) == 30
    assert first.warnings == []
    assert len(first.goals) == 3


def test_non_finite_goal_targets_become_zero():
    inputs = inputs_from_payload(
        {
            "goals": [
                {"id": "g1", "goal_type": "applications", "target_value": "nan"},
                {"id": "g2", "goal_type": "offers", "target_value": float("inf")},
            ]
        }
    )

    assert [g.target_value for g in inputs.goals] == [0.0, 0.0]
    assert len(inputs.warnings) == 2
    assert all("invalid target_value" in w for w in inputs.warnings)
