"""Search Insights API server."""

from __future__ import annotations

import os
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from skills.search_analytics.pipeline import AnalysisCache, day_bounds, restrict_to_range
from skills.search_analytics.recommendations import build_recommendation_payload, generate_recommendations
from skills.search_analytics.sources.rows import inputs_from_payload
from skills.search_analytics.types import AnalysisResult


class AnalyzeRequest(BaseModel):
    jobs: list[dict[str, Any]] = Field(default_factory=list)
    interviews: list[dict[str, Any]] = Field(default_factory=list)
    status_history: list[dict[str, Any]] = Field(default_factory=list)
    application_packages: list[dict[str, Any]] = Field(default_factory=list)
    goals: list[dict[str, Any]] = Field(default_factory=list)
    start_date: str = ""
    end_date: str = ""


class RecommendationRequest(AnalyzeRequest):
    model: str = "gpt-4.1-mini"


app = FastAPI(title="Search Insights API", version="0.1.0")

allowed_origins_raw = os.getenv("ALLOWED_ORIGINS", "*").strip()
if allowed_origins_raw == "*" or not allowed_origins_raw:
    allowed_origins = ["*"]
else:
    allowed_origins = [item.strip() for item in allowed_origins_raw.split(",") if item.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

analysis_cache = AnalysisCache(maxsize=int(os.getenv("ANALYSIS_CACHE_SIZE", "16")))


def _analyze_request(payload: AnalyzeRequest) -> AnalysisResult:
    try:
        start, end = day_bounds(payload.start_date or None, payload.end_date or None)
        inputs = inputs_from_payload(
            {
                "jobs": payload.jobs,
                "interviews": payload.interviews,
                "status_history": payload.status_history,
                "application_packages": payload.application_packages,
                "goals": payload.goals,
            }
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return analysis_cache.analyze(restrict_to_range(inputs, start, end), start, end)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/analyze")
def analyze_applications(payload: AnalyzeRequest) -> dict[str, object]:
    result = _analyze_request(payload)
    return {
        "ok": True,
        "analysis": result.to_dict(),
        "recommendation_payload": build_recommendation_payload(result),
    }


@app.post("/api/recommendations")
def recommend(payload: RecommendationRequest) -> dict[str, object]:
    result = _analyze_request(payload)
    if result.totals.total_applications == 0:
        raise HTTPException(status_code=400, detail="No job applications found to analyze")

    recommendation_payload = build_recommendation_payload(result)
    try:
        recommendations = generate_recommendations(recommendation_payload, model=payload.model)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return {
        "ok": True,
        "analysis": result.to_dict(),
        "recommendation_payload": recommendation_payload,
        "recommendations": recommendations.to_dict(),
    }
