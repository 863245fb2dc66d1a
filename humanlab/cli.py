from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from humanlab.core.errors import HumanlabError
from humanlab.core.logging import configure_logging
from humanlab.schemas.humanize import HumanizeMode, HumanizeRequest, PromptOverrides


def _load_text(text: str | None, input_file: str | None) -> str:
    if text and input_file:
        raise ValueError("Use either --text or --input-file, not both.")
    if not text and not input_file:
        raise ValueError("Provide --text or --input-file.")
    if text:
        return text
    return Path(input_file).read_text(encoding="utf-8")


def _write_json(payload: dict, path: str | None) -> None:
    rendered = json.dumps(payload, ensure_ascii=True, indent=2)
    if path:
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(rendered + "\n", encoding="utf-8")
    print(rendered)


def _add_input_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--text", default=None, help="Text to process.")
    parser.add_argument("--input-file", default=None, help="Read the text from this file.")
    parser.add_argument("--output", default=None, help="Also write the JSON result to this path.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="humanlab",
        description="Score text for AI content and rewrite it with LLM providers.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Score text with the detection provider.")
    _add_input_args(analyze)

    humanize = sub.add_parser("humanize", help="Rewrite text and score it before and after.")
    _add_input_args(humanize)
    humanize.add_argument(
        "--mode",
        choices=[mode.value for mode in HumanizeMode],
        default=HumanizeMode.GEMINI.value,
        help="'both' runs gemini first, then anthropic on its output.",
    )
    humanize.add_argument("--anthropic-system", default=None)
    humanize.add_argument("--anthropic-user", default=None)
    humanize.add_argument("--gemini-system", default=None)
    humanize.add_argument("--gemini-user", default=None)

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")

    return parser


async def _analyze(text: str) -> dict:
    from humanlab.services.detection import DetectionClient

    result = await DetectionClient().detect(text)
    return {"data": result.model_dump(mode="json")}


async def _humanize(text: str, args: argparse.Namespace) -> dict:
    from humanlab.services.orchestrator import HumanizationOrchestrator

    request = HumanizeRequest(
        text=text,
        mode=HumanizeMode(args.mode),
        prompts=PromptOverrides(
            anthropic_system=args.anthropic_system,
            anthropic_user=args.anthropic_user,
            gemini_system=args.gemini_system,
            gemini_user=args.gemini_user,
        ),
    )
    result = await HumanizationOrchestrator().humanize(request)
    return result.to_payload()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("humanlab.main:app", host=args.host, port=args.port, reload=args.reload)
        return 0

    configure_logging(stream=sys.stderr)
    try:
        text = _load_text(args.text, args.input_file)
        if args.command == "analyze":
            payload = asyncio.run(_analyze(text))
        else:
            payload = asyncio.run(_humanize(text, args))
    except (HumanlabError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    _write_json(payload, args.output)
    return 1 if payload.get("error") else 0


if __name__ == "__main__":
    sys.exit(main())
