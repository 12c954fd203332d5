"""CLI entrypoint for issue article search and campaign metric insights."""

from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
import sys
from typing import Optional, Sequence

import uvicorn

from intelligence.pipeline import run_issue_articles, run_metrics_deep_dive
from models import DeepDiveCategory, ExpandedMetrics
from processing import build_metrics_overview
from utils.exceptions import CampaignInsightsError
from utils.logger import configure_package_loggers


def _load_metrics(path: str) -> ExpandedMetrics:
    raw = Path(path).read_text(encoding="utf-8")
    return ExpandedMetrics.model_validate_json(raw)


def _print(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Campaign Insights CLI")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    articles = sub.add_parser("articles")
    articles.add_argument("--issue", required=True)

    deep_dive = sub.add_parser("deep-dive")
    deep_dive.add_argument("--metrics-file", required=True)
    deep_dive.add_argument(
        "--category",
        required=True,
        choices=[category.value for category in DeepDiveCategory],
    )

    summary = sub.add_parser("summary")
    summary.add_argument("--metrics-file", required=True)

    serve = sub.add_parser("serve")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_package_loggers(level=args.log_level)

    try:
        if args.command == "articles":
            result = asyncio.run(run_issue_articles(args.issue))
            _print(result.model_dump(mode="json", by_alias=True))
            return 0

        if args.command == "deep-dive":
            metrics = _load_metrics(args.metrics_file)
            result = asyncio.run(run_metrics_deep_dive(metrics, DeepDiveCategory(args.category)))
            _print(result.model_dump(mode="json", by_alias=True))
            return 0

        if args.command == "summary":
            _print(build_metrics_overview(_load_metrics(args.metrics_file)))
            return 0

        if args.command == "serve":
            uvicorn.run("webapp.app:app", host=args.host, port=args.port, reload=args.reload)
            return 0
    except CampaignInsightsError as exc:
        print(json.dumps({"error": str(exc)}, ensure_ascii=False), file=sys.stderr)
        return 1
    return 2


if __name__ == "__main__":
    sys.exit(main())
