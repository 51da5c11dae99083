import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path

from app.config.settings import Settings
from app.entities.memory_store import InMemoryEntityStore
from app.logging.logger import Log
from app.pipeline.exceptions import UploadRejectedError
from app.pipeline.file_types import validate_upload
from app.pipeline.models import FileStatus, FileUpload
from app.pipeline.orchestrator import build_orchestrator


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m app.main",
        description="Extract invoices, products and customers from PDF, image and Excel files.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="Files to extract")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the extracted records to this JSON file instead of stdout",
    )
    return parser.parse_args(argv)


def load_upload(path: Path, max_size_bytes: int) -> FileUpload:
    """Read *path* and check it against the accepted upload constraints."""
    mime_type, _ = mimetypes.guess_type(path.name)
    mime_type = mime_type or "application/octet-stream"
    content = path.read_bytes()
    validate_upload(mime_type, len(content), max_size_bytes)
    return FileUpload(name=path.name, mime_type=mime_type, content=content)


async def run(settings: Settings, paths: list[Path], output: Path | None = None) -> int:
    """Extract every accepted file and emit the resulting store as JSON."""
    uploads: list[FileUpload] = []
    rejected = 0
    for path in paths:
        try:
            uploads.append(load_upload(path, settings.max_file_size_bytes))
        except (OSError, UploadRejectedError) as exc:
            Log.error(f"Skipping {path}: {exc}")
            rejected += 1

    store = InMemoryEntityStore()
    orchestrator = build_orchestrator(settings, repository=store)
    orchestrator.subscribe(lambda file_id, value: Log.info(f"Progress {value}%", file_id=file_id))

    files = await orchestrator.process_many(uploads)
    rendered = json.dumps(store.snapshot(), indent=2, ensure_ascii=False)
    if output is None:
        print(rendered)
    else:
        output.write_text(rendered + "\n", encoding="utf-8")
        Log.info(f"Wrote results to {output}")

    failed = sum(1 for file in files if file.status is FileStatus.FAILED)
    return 1 if failed or rejected else 0


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> configure logging -> run the extraction."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(
        "Starting extraction",
        files=len(args.files),
        provider=settings.structuring_provider,
        env=settings.app_env,
    )
    return asyncio.run(run(settings, args.files, args.output))


if __name__ == "__main__":
    sys.exit(main())
