from datetime import datetime, timezone

import pytest

import skills.search_analytics.recommendations as recommendations
from app.utils.llm_client import extract_json_object, extract_output_text, llm_call
from skills.search_analytics.pipeline import analyze
from skills.search_analytics.recommendations import (
    build_recommendation_payload,
    build_recommendation_prompt,
    generate_recommendations,
    parse_recommendations,
)
from skills.search_analytics.types import AnalysisInputs, ApplicationRecord, ApplicationStatus

S = ApplicationStatus


def _payload() -> dict:
    jobs = [
        ApplicationRecord(
            id=f"j{i}",
            status=s,
            created_at=datetime(2026, 3, 2 + i, 10, 0, tzinfo=timezone.utc),
            industry="Tech",
            source_url="https://www.linkedin.com/jobs/view/1" if i % 2 else None,
        )
        for i, s in enumerate([S.ACCEPTED, S.REJECTED, S.INTERVIEWING, S.APPLIED])
    ]
    return build_recommendation_payload(analyze(AnalysisInputs(jobs=jobs)))


def test_payload_has_expected_shape():
    payload = _payload()

    assert set(payload) == {
        "totalApplications",
        "successfulApplications",
        "interviewedApplications",
        "rejectedApplications",
        "industryData",
        "companySizeData",
        "roleTypeData",
        "sourceData",
        "patterns",
        "timingData",
        "customizationImpact",
    }
    assert payload["totalApplications"] == 4
    assert payload["industryData"][0] == {
        "industry": "Tech",
        "total": 4,
        "successRate": 25.0,
        "interviewRate": 50.0,
        "rejectionRate": 25.0,
    }
    assert payload["companySizeData"][0]["size"] == "Unknown"
    assert {r["source"] for r in payload["sourceData"]} == {"LinkedIn", "Direct Application"}
    assert set(payload["timingData"]) == {"dayData", "hourData"}
    assert payload["timingData"]["hourData"][0]["hour"] == "Morning (9-12)"
    assert set(payload["patterns"]["successful"]) == {"avgDescriptionLength", "hasNotes", "hasSalary", "hasLocation"}


def test_prompt_mentions_data_summary():
    prompt = build_recommendation_prompt(_payload())

    assert "- Total Applications: 4" in prompt
    assert "- Tech: 25.0% success, 50.0% interviews (4 apps)" in prompt
    assert '"focusAreas"' in prompt


def test_parse_recommendations_normalizes_priorities():
    parsed = parse_recommendations(
        {
            "keyFindings": ["Tech is strong", ""],
            "recommendations": [
                {"title": "Target Tech", "description": "More Tech roles", "priority": "HIGH"},
                {"title": "Follow up", "description": "Within a week", "priority": "urgent"},
                {"title": "", "description": "dropped"},
                "not a dict",
            ],
            "focusAreas": "not a list",
        }
    )

    assert parsed.key_findings == ["Tech is strong"]
    assert [(r.priority, r.title) for r in parsed.recommendations] == [("high", "Target Tech"), ("medium", "Follow up")]
    assert parsed.focus_areas == []
    assert parsed.to_dict()["recommendations"][0] == {"priority": "high", "title": "Target Tech", "description": "More Tech roles"}


def test_generate_recommendations_calls_llm_once(monkeypatch):
    calls = []

    def fake_llm_call(feature, **kwargs):
        calls.append((feature, kwargs))
        return {"output_text": '```json\n{"keyFindings": ["a"], "recommendations": [], "focusAreas": ["b"]}\n```'}

    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(recommendations, "llm_call", fake_llm_call)

    result = generate_recommendations(_payload(), model="test-model")

    assert result.key_findings == ["a"]
    assert result.focus_areas == ["b"]
    assert len(calls) == 1
    feature, kwargs = calls[0]
    assert feature == "success_recommendations"
    assert kwargs["model"] == "test-model"
    assert kwargs["api_key"] == "sk-test"
    assert kwargs["text"] == {"format": {"type": "json_object"}}


def test_generate_recommendations_requires_key(monkeypatch):
    monkeypatch.delenv("MISSING_KEY_FOR_TEST", raising=False)

    with pytest.raises(ValueError):
        generate_recommendations(_payload(), api_key_env="MISSING_KEY_FOR_TEST")


def test_llm_call_blocked_by_disable_flag(monkeypatch, capsys):
    monkeypatch.setenv("DISABLE_LLM", "1")

    with pytest.raises(RuntimeError):
        llm_call("success_recommendations", api_key="sk-test", input=[{"role": "user", "content": "hi"}])

    assert "[LLM BLOCKED] feature=success_recommendations" in capsys.readouterr().out


def test_extract_output_text_shapes():
    assert extract_output_text({"output_text": "hello"}) == "hello"
    assert extract_output_text({"output": [{"content": [{"type": "output_text", "text": "a"}, {"text": "b"}]}]}) == "a\nb"
    assert extract_output_text({"choices": [{"message": {"content": "c"}}]}) == "c"
    assert extract_output_text({}) == ""


def test_extract_json_object():
    assert extract_json_object('Sure! {"keyFindings": []} Hope this helps') == {"keyFindings": []}
    with pytest.raises(ValueError):
        extract_json_object("no json here")
    with pytest.raises(ValueError):
        extract_json_object("[1, 2]")


def test_parse_recommendations_ignores_non_list_items():
    parsed = parse_recommendations({"keyFindings": ["a"], "recommendations": 5, "focusAreas": ["b"]})

    assert parsed.recommendations == []
    assert parsed.key_findings == ["a"]
    assert parsed.focus_areas == ["b"]


def test_generate_recommendations_tolerates_odd_reply_shape(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(
        recommendations,
        "llm_call",
        lambda feature, **kwargs: {"output_text": '{"keyFindings": "x", "recommendations": {"title": "t"}}'},
    )

    result = generate_recommendations(_payload())

    assert result.recommendations == []
    assert result.key_findings == []
