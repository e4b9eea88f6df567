import argparse
import asyncio
import json
import sys
from pathlib import Path

from docvision.config.settings import Settings
from docvision.logging.logger import Log
from docvision.processor.orchestrator import PipelineOrchestrator, build_orchestrator


async def _summarize(orchestrator: PipelineOrchestrator, path: Path, base_url: str) -> None:
    summaries = await orchestrator.process(path)
    payload = {
        "document": orchestrator.session_store.describe(),
        "pages": [summary.to_dict(base_url) for summary in summaries],
    }
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")


async def _detect(orchestrator: PipelineOrchestrator, path: Path) -> None:
    detections = await orchestrator.detector.raw_detect(path)
    json.dump(detections, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="docvision")
    commands = parser.add_subparsers(dest="command", required=True)
    summarize = commands.add_parser("summarize", help="Run the full pipeline on a PDF")
    summarize.add_argument("path", type=Path)
    detect = commands.add_parser("detect", help="Print raw logo/object detections for an image")
    detect.add_argument("path", type=Path)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Entry point: load settings -> build the orchestrator -> run one command."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    orchestrator = build_orchestrator(settings)
    if args.command == "detect":
        asyncio.run(_detect(orchestrator, args.path))
    else:
        asyncio.run(_summarize(orchestrator, args.path, settings.public_base_url))


if __name__ == "__main__":
    main()
