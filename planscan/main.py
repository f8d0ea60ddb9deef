import argparse
import asyncio
import sys
from pathlib import Path

from planscan.api.http import build_http_client
from planscan.api.models import UploadedFile
from planscan.api.stream_client import StreamClient
from planscan.api.upload_client import UploadClient
from planscan.config.settings import Settings
from planscan.logging.logger import Log
from planscan.pages.factory import PageSourceFactory
from planscan.wizard.models import Step, WizardSession
from planscan.wizard.wizard import UploadWizard


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Upload a drawing and analyze one page.")
    parser.add_argument("pdf", type=Path, help="PDF file to upload")
    parser.add_argument("--trade", required=True, help="Trade id, e.g. fire-alarm-detector-v1")
    parser.add_argument("--page", type=int, default=1, help="1-based page number")
    parser.add_argument(
        "--engine",
        choices=PageSourceFactory.engines(),
        default=None,
        help="Page rasterizer, overrides PAGE_ENGINE",
    )
    return parser.parse_args(argv)


def _print_progress(session: WizardSession) -> None:
    progress = session.progress
    if progress is not None:
        print(f"[{progress.percent:3d}%] {progress.status}: {progress.message}")


async def run(args: argparse.Namespace, settings: Settings) -> int:
    """Drive one headless wizard run; return the process exit code."""
    async with build_http_client(settings) as http_client:
        wizard = UploadWizard(
            upload_client=UploadClient(http_client),
            stream_client=StreamClient(
                http_client,
                idle_timeout_seconds=settings.stream_idle_timeout_seconds,
                connect_timeout_seconds=settings.request_timeout_seconds,
            ),
            page_source=PageSourceFactory.create(settings, engine=args.engine),
            include_raw_detections=settings.include_raw_detections,
            on_change=_print_progress,
        )
        wizard.open()
        try:
            wizard.select_trade(args.trade)
            await wizard.add_files([UploadedFile.from_path(args.pdf)])
            if await wizard.advance():
                wizard.select_page(args.page)
                await wizard.advance()
            session = wizard.session
            if session.step is not Step.RESULTS or session.result is None:
                print(f"Error: {session.error or 'processing did not complete'}", file=sys.stderr)
                return 1
            result = session.result
            print(
                f"Page {result.page_number}: {result.detections.total_detections} detections "
                f"in {result.processing_time_seconds:.1f}s"
            )
            print(result.analysis_text)
            return 0
        finally:
            wizard.close()


def main(argv: list[str] | None = None) -> None:
    """Entry point: settings -> logging -> clients -> wizard run."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    sys.exit(asyncio.run(run(args, settings)))


if __name__ == "__main__":
    main()
