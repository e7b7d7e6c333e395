"""CLI for inspecting week scopes and the payloads built from them."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from lernscope import get_version
from lernscope.core.config import RegistryConfig
from lernscope.core.errors import ConfigurationFault
from lernscope.review.payload import build_instruction_payload, build_scope_snapshot
from lernscope.review.prompt import render_review_prompt
from lernscope.weeks.registry import WeekRegistry, build_registry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect correction scopes per course week.")
    parser.add_argument(
        "--weeks-dir",
        default=None,
        help="Directory of week YAML files (default: packaged data)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("courses", help="List registered courses.")

    weeks = subparsers.add_parser("weeks", help="List registered weeks of a course.")
    weeks.add_argument("course", help="Course level or slug, e.g. A1 or aleman1")

    show = subparsers.add_parser("show", help="Print the summary and scope snapshot of a week.")
    show.add_argument("course")
    show.add_argument("week", help="Week number or token, e.g. 2 or w02")

    payload = subparsers.add_parser("payload", help="Build the reviewer payload for a text.")
    payload.add_argument("course")
    payload.add_argument("week")
    payload.add_argument("--text", required=True, help="Submission text to review.")
    payload.add_argument("--student", default="Estudiante", help="Student display name.")
    payload.add_argument("--prompt", action="store_true", help="Print the rendered prompt instead of JSON.")
    return parser


def _registry(args: argparse.Namespace) -> WeekRegistry:
    data_dir = Path(args.weeks_dir).expanduser().resolve() if args.weeks_dir else None
    return build_registry(RegistryConfig(data_dir=data_dir))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        registry = _registry(args)
        if args.command == "courses":
            for course in sorted(registry.list_courses(), key=lambda level: level.value):
                print(course.value)
            return 0

        if args.command == "weeks":
            print(json.dumps(list(registry.list_weeks(args.course))))
            return 0

        context = registry.assert_valid(args.course, args.week)
        if args.command == "show":
            summary = registry.summarize(args.course, args.week)
            output = {
                "summary": summary.model_dump(mode="json"),
                "scope": build_scope_snapshot(context),
            }
            print(json.dumps(output, indent=2, ensure_ascii=False))
            return 0

        payload = build_instruction_payload(context, args.text, args.student)
        if args.prompt:
            sys.stdout.write(render_review_prompt(payload))
        else:
            print(json.dumps(payload.model_dump(mode="json"), indent=2, ensure_ascii=False))
        return 0
    except ConfigurationFault as exc:
        print(f"[lernscope] {exc}", file=sys.stderr)
        for detail in exc.details:
            print(f"  - {detail}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
