"""Command-line entry point: analyze a URL or run the API server."""

import argparse
import json
import sys

from logging_config import configure_logging
from schemas import AnalysisReport
from scraper import AnalysisError, InvalidUrlError, analyze_url

STATUS_ICONS = {"present": "✓", "missing": "✗", "needs_improvement": "⚠"}


def bar(score: int, width: int = 20) -> str:
    filled = round(score / 100 * width)
    return "█" * filled + "░" * (width - filled)


def format_report(report: AnalysisReport) -> str:
    """Plain-text rendering of a report for the terminal."""
    summary = report.status_summary
    lines = [
        f"URL: {report.url}",
        f"Overall Score: {report.score}/100  {bar(report.score)}",
        "",
        f"Essential: {summary.essential.present}/{summary.essential.total}",
        f"Social:    {summary.social.present}/{summary.social.total}",
        f"Technical: {summary.technical.present}/{summary.technical.total}",
        "",
        "## Tags",
    ]
    for tag in report.tags:
        value = tag.value if len(tag.value) <= 60 else tag.value[:60] + "..."
        lines.append(f"{STATUS_ICONS[tag.status]} {tag.name}: {value or '-'}")
        if tag.status != "present" and tag.recommendation:
            lines.append(f"    {tag.recommendation}")

    for heading, items in (
        ("Critical", report.recommendations.critical),
        ("Improvements", report.recommendations.improvements),
    ):
        lines.append("")
        lines.append(f"## {heading}")
        if not items:
            lines.append("- None")
        for item in items:
            lines.append(f"- **{item.title}**: {item.description}")
            if item.solution:
                lines.extend(f"    {snippet}" for snippet in item.solution.splitlines())
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="seo-meta", description="Meta tag SEO analyzer")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    commands = parser.add_subparsers(dest="command", required=True)

    analyze = commands.add_parser("analyze", help="Analyze the meta tags of one page")
    analyze.add_argument("url", help="Page URL; https:// is added when no scheme is given")
    analyze.add_argument("--json", action="store_true", help="Print the report as JSON")
    analyze.add_argument(
        "--relays",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Fall back to CORS relays when the direct fetch fails (default: SEO_USE_CORS_RELAYS)",
    )

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("main:app", host=args.host, port=args.port)
        return 0

    try:
        report = analyze_url(args.url, use_relays=args.relays)
    except InvalidUrlError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except AnalysisError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report.model_dump(mode="json", by_alias=True), indent=2))
    else:
        print(format_report(report))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
