from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.analysis import AtsEngine, load_rules  # noqa: E402
from app.core.errors import ATSCheckerError  # noqa: E402
from app.parsing.parse import parse_document  # noqa: E402

logger = logging.getLogger("ats.cli")


def _read_job_description(args: argparse.Namespace) -> str:
    if args.job_text:
        return args.job_text
    return Path(args.job).read_text(encoding="utf-8", errors="replace")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Score a resume against a job description.")
    parser.add_argument("--resume", required=True, help="Resume file (.pdf, .doc, .docx or .txt)")
    job_group = parser.add_mutually_exclusive_group(required=True)
    job_group.add_argument("--job", help="Path to a plain-text job description")
    job_group.add_argument("--job-text", help="Job description passed inline")
    parser.add_argument("--rules", help="YAML file overriding the built-in analysis rules")
    parser.add_argument("--out", help="Write the JSON result to this path instead of stdout")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(message)s")

    try:
        parsed = parse_document(args.resume)
        job_description = _read_job_description(args)
        engine = AtsEngine(load_rules(args.rules)) if args.rules else AtsEngine()
    except (ATSCheckerError, OSError, RuntimeError) as exc:
        logger.error("analyze_resume_failed: %s", exc)
        return 1

    result = engine.analyze(parsed.text, job_description)
    payload = json.dumps(result.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(payload + "\n", encoding="utf-8")
    else:
        sys.stdout.write(payload + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
