"""CLI for search_analytics package."""

from __future__ import annotations

import argparse
from datetime import date, timedelta

from .pipeline import build_console_summary, run


def _resolve_dates(args: argparse.Namespace) -> tuple[str | None, str | None]:
    if args.days is not None:
        end = date.today()
        start = end - timedelta(days=args.days)
        return start.isoformat(), end.isoformat()

    if args.source == "sample" and (not args.start or not args.end):
        raise SystemExit("Provide --days OR both --start and --end")
    if bool(args.start) != bool(args.end):
        raise SystemExit("Provide both --start and --end")
    return args.start, args.end


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze job search outcomes")
    parser.add_argument("--source", choices=["json", "csv", "sample"], required=True)
    parser.add_argument("--input", help="Path to a JSON export or jobs CSV")
    parser.add_argument("--start", help="YYYY-MM-DD")
    parser.add_argument("--end", help="YYYY-MM-DD")
    parser.add_argument("--days", type=int)
    parser.add_argument("--out", default="output")
    parser.add_argument("--title", default="Job Search Analytics")
    parser.add_argument("--dry-run", action="store_true", help="Analyze only; do not write files")
    parser.add_argument("--report", action="store_true", help="Write Markdown analysis report")
    parser.add_argument("--recommend", action="store_true", help="Ask the LLM for recommendations")
    parser.add_argument("--ai-model", default="gpt-4.1-mini")
    parser.add_argument("--ai-api-key-env", default="OPENAI_API_KEY")
    parser.add_argument("--ai-base-url", default="https://api.openai.com/v1")
    parser.add_argument("--ai-timeout-sec", type=int, default=60)
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    start, end = _resolve_dates(args)
    print("Run started.")

    result = run(
        source=args.source,
        start=start,
        end=end,
        out_dir=args.out,
        title=args.title,
        input_path=args.input,
        dry_run=args.dry_run,
        report=args.report,
        recommend=args.recommend,
        ai_model=args.ai_model,
        ai_api_key_env=args.ai_api_key_env,
        ai_base_url=args.ai_base_url,
        ai_timeout_sec=args.ai_timeout_sec,
    )

    print(f"Run ID: {result.run_id}")
    for line in build_console_summary(result.result):
        print(line)
    if args.dry_run:
        print("dry_run=true (no files written)")
    else:
        print(f"analysis.json: {result.artifacts['json_path']}")
        print(f"recommendation_payload.json: {result.artifacts['recommendation_payload_path']}")
        if args.report:
            print(f"analysis_report.md: {result.artifacts.get('report_path', '')}")
        if result.artifacts.get("recommendations_path"):
            print(f"recommendations.json: {result.artifacts['recommendations_path']}")
    if result.recommendations is not None:
        print("Key findings")
        for finding in result.recommendations.key_findings:
            print(f"- {finding}")
    if result.warnings:
        print("Warnings:")
        for warning in result.warnings:
            print(f"- {warning}")


if __name__ == "__main__":
    main()
