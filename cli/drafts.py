"""CLI for inspecting stored draft JSON files."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Sequence


def _load(path: Path) -> Any:
    if not path.exists():
        raise SystemExit(f"File not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"{path} is not valid JSON: {exc}")


def main(argv: Sequence[str] | None = None) -> None:
    """Print progress or the publish payload of a stored draft as JSON.

    Example::

        python -m cli.drafts evaluate draft.json
        python -m cli.drafts transform draft.json
    """

    parser = argparse.ArgumentParser(description="Job draft inspector")
    sub = parser.add_subparsers(dest="command", required=True)
    evaluate_cmd = sub.add_parser("evaluate", help="Recompute progress of a stored draft")
    evaluate_cmd.add_argument("file", help="Path to the draft JSON file")
    transform_cmd = sub.add_parser("transform", help="Print the publish payload of a draft")
    transform_cmd.add_argument("file", help="Path to the draft JSON file")
    args = parser.parse_args(argv)

    from pydantic import ValidationError

    from core.progress import describe_hint_drift, evaluate_payload
    from core.publish import transform
    from state.autosave import parse_stored_record
    from utils.logging_context import configure_logging
    import config

    configure_logging(level=config.resolve_log_level())
    payload = _load(Path(args.file))
    if not isinstance(payload, dict):
        raise SystemExit("Expected a JSON object describing one draft.")

    if args.command == "evaluate":
        progress = evaluate_payload(payload)
        result = progress.to_dict()
        try:
            drift = describe_hint_drift(parse_stored_record(payload), progress)
        except ValidationError:
            drift = None
        if drift:
            result["hint_drift"] = drift
    else:
        try:
            draft = parse_stored_record(payload)
        except ValidationError as exc:
            raise SystemExit(f"Draft could not be read: {exc}")
        result = transform(draft).to_wire()
    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":  # pragma: no cover
    main()
