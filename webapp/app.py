"""Web App: FastAPI endpoints for issue articles and campaign metric insights."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from intelligence.pipeline import InsightsPipeline
from models import DeepDiveCategory, ExpandedMetrics
from processing import build_metrics_overview
from utils.exceptions import CampaignInsightsError


logger = logging.getLogger(__name__)

ARTICLES_CACHE_SECONDS = 3_600
DEEP_DIVE_CACHE_SECONDS = 86_400


async def get_pipeline() -> AsyncIterator[InsightsPipeline]:
    """Request-scoped pipeline; overridden in tests."""
    pipeline = InsightsPipeline.from_settings()
    try:
        yield pipeline
    finally:
        await pipeline.aclose()


def _cached_json(payload: Any, max_age: int) -> JSONResponse:
    return JSONResponse(
        payload,
        headers={"Cache-Control": f"public, max-age={max_age}, stale-while-revalidate={max_age}"},
    )


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


app = FastAPI(title="Campaign Insights API", version="1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CampaignInsightsError)
async def insights_error_handler(request: Request, exc: CampaignInsightsError) -> JSONResponse:
    # raised while building the pipeline (missing API key and similar)
    logger.error(f"{request.url.path} unavailable: {exc}")
    return _error("Service temporarily unavailable", 503)


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/api/issues/articles")
async def issue_articles(
    issue: str = "",
    pipeline: InsightsPipeline = Depends(get_pipeline),
) -> JSONResponse:
    issue = issue.strip()
    if not issue:
        return _error("Missing issue", 400)

    try:
        result = await pipeline.fetch_articles_for_issue(issue)
    except CampaignInsightsError as exc:
        logger.error(f"Failed to fetch articles for '{issue}': {exc}")
        return _error("Failed to fetch articles", 502)

    return _cached_json(result.model_dump(mode="json", by_alias=True), ARTICLES_CACHE_SECONDS)


@app.post("/api/metrics/{category}/deep-dive")
async def metrics_deep_dive(
    category: str,
    metrics: ExpandedMetrics,
    pipeline: InsightsPipeline = Depends(get_pipeline),
) -> JSONResponse:
    try:
        selected = DeepDiveCategory(category)
    except ValueError:
        return _error("Invalid category", 400)

    try:
        result = await pipeline.generate_deep_dive(metrics, selected)
    except CampaignInsightsError as exc:
        logger.error(f"Failed to generate {selected.value} deep dive: {exc}")
        return _error("Failed to generate deep dive", 502)

    return _cached_json(result.model_dump(mode="json", by_alias=True), DEEP_DIVE_CACHE_SECONDS)


@app.post("/api/metrics/summary")
async def metrics_summary(metrics: ExpandedMetrics) -> Dict[str, Any]:
    return build_metrics_overview(metrics)
