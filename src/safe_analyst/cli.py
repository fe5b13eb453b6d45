"""CLI interface for safe-analyst.

Usage:
    # Sanitize text (stdin: raw text, stdout: sanitized text)
    cat notes.txt | python -m safe_analyst.cli --rules rules.json sanitize

    # Auto-mask emails and phones, write the updated rule document
    python -m safe_analyst.cli --input notes.txt --rules rules.json \
        --out rules.json automask --detector email --detector phone

    # Add a manual rule
    python -m safe_analyst.cli --rules rules.json --out rules.json \
        add --original "Acme Corp" --category Organization

    # Show what the detectors would find
    python -m safe_analyst.cli --input notes.txt detect

The rule document is the same JSON the export produces, so the output of
``automask``/``add`` can be fed back through ``--rules``.
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from .config import load_config, load_from_yaml, create_session
from .errors import InvalidConfigDocument
from .serializer import dumps, rule_to_dict
from .session import MaskingSession
from .types import Category

logger = logging.getLogger(__name__)


def _read_text(args: argparse.Namespace) -> str:
    if args.input:
        return Path(args.input).expanduser().read_text(encoding="utf-8")
    return sys.stdin.read()


def _write_document(session: MaskingSession, args: argparse.Namespace) -> None:
    if args.out or args.save:
        path = session.save_config(args.out or None)
        sys.stderr.write(f"Wrote {len(session.rules)} rules to {path}\n")
    else:
        sys.stdout.write(dumps(session.rules, indent=session.export_indent))
        sys.stdout.write("\n")


def cmd_sanitize(session: MaskingSession, args: argparse.Namespace) -> None:
    """Sanitized text on stdout."""
    session.text = _read_text(args)
    sys.stdout.write(session.plain_text())


def cmd_segments(session: MaskingSession, args: argparse.Namespace) -> None:
    """Annotated segments as JSON."""
    session.text = _read_text(args)
    output = [
        {"text": s.text}
        if not s.is_match else
        {
            "text": s.text,
            "replacement": s.replacement,
            "category": s.category.value,
        }
        for s in session.segments()
    ]
    json.dump(output, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_detect(session: MaskingSession, args: argparse.Namespace) -> None:
    """Detector matches as JSON."""
    text = _read_text(args)
    names = args.detector or list(session.detectors)
    output = {}
    for name in names:
        detector = session.detectors[name]
        output[name] = detector.detect(text)
    json.dump(output, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_automask(session: MaskingSession, args: argparse.Namespace) -> None:
    """Auto-mask the named detectors and write the rule document."""
    session.text = _read_text(args)
    for name in args.detector or list(session.detectors):
        added = session.auto_mask(name)
        sys.stderr.write(f"{name}: {len(added)} new rules\n")
    _write_document(session, args)


def cmd_add(session: MaskingSession, args: argparse.Namespace) -> None:
    """Add or update one rule and write the rule document."""
    if not args.original.strip():
        raise SystemExit("error: --original must not be blank")
    session.add_rule(args.original, Category.parse(args.category), args.replacement)
    _write_document(session, args)


def cmd_rules(session: MaskingSession, args: argparse.Namespace) -> None:
    """List the current rules as JSON."""
    json.dump([rule_to_dict(r) for r in session.rules], sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="safe_analyst",
        description="Rule-based text sanitizer with auto-masking",
    )
    parser.add_argument("--rules", default="", help="Rule document (JSON) to start from")
    parser.add_argument("--input", default="", help="Text file to read instead of stdin")
    parser.add_argument("--out", default="", help="Write the rule document here instead of stdout")
    parser.add_argument("--save", action="store_true",
                        help="Write the rule document to the configured export filename")
    parser.add_argument("--config", default="", help="YAML settings file")
    parser.add_argument("--region", default="", help="Default phone region, e.g. US or GB")
    parser.add_argument("--log-level", default="", help="Logging level (default from settings)")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("sanitize", help="Apply rules to text (stdin)")
    sub.add_parser("segments", help="Annotated segments as JSON")
    sub.add_parser("rules", help="List rules")

    for name, help_text in (("detect", "Show detector matches"),
                            ("automask", "Create rules from detector matches")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--detector", action="append", default=[],
                       help="Detector name (repeatable; default: all)")

    add = sub.add_parser("add", help="Add or update a rule")
    add.add_argument("--original", required=True)
    add.add_argument("--category", default=Category.CUSTOM.value)
    add.add_argument("--replacement", default=None, help="Custom value (default: generated)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    cmds = {
        "sanitize": cmd_sanitize,
        "segments": cmd_segments,
        "detect": cmd_detect,
        "automask": cmd_automask,
        "add": cmd_add,
        "rules": cmd_rules,
    }

    try:
        settings = load_from_yaml(args.config) if args.config else load_config({})
        if args.region:
            settings["phone_region"] = args.region.upper()
        logging.basicConfig(
            level=(args.log_level or settings["log_level"]).upper(),
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

        session = create_session(settings)
        if args.rules:
            session.import_file(args.rules)
        names = [n.lower() for n in getattr(args, "detector", [])]
        for name in names:
            if name not in session.detectors:
                parser.error(f"unknown detector {name!r} (known: {', '.join(session.detectors)})")
        if names:
            args.detector = names
        cmds[args.command](session, args)
    except InvalidConfigDocument as e:
        sys.stderr.write(f"Invalid configuration file: {e}\n")
        return 2
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.debug("Command failed", exc_info=True)
        sys.stderr.write(f"error: {e}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
