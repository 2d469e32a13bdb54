"""Main entry point for Resume Relay."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from src import __version__
from src.config.settings import Settings
from src.utils.logging import configure_logging

DEFAULT_CHAT_PHONE = "15550000000"


def _read_job_description(path: Path) -> str:
    if str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _write_json(payload: object) -> None:
    def _default(value: object):
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        model_dump = getattr(value, "model_dump", None)
        if callable(model_dump):
            return model_dump(mode="json")
        return str(value)

    print(json.dumps(payload, indent=2, default=_default))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="resume-relay",
        description="Resume Relay: job-tailored resumes delivered over chat",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src generate --email ada@example.com --job-file job.txt
  python -m src tailor --profile profiles/ada.yaml --job-file job.txt --pdf out.pdf
  python -m src chat --phone 15550102030
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )

    subparsers = parser.add_subparsers(
        dest="mode",
        title="modes",
        description="Available commands",
    )

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Extract requirements from a job description",
    )
    analyze_parser.add_argument(
        "job_file",
        type=Path,
        help="Job description text file ('-' for stdin)",
    )

    tailor_parser = subparsers.add_parser(
        "tailor",
        help="Tailor a profile file to a job description without uploading",
    )
    tailor_parser.add_argument("--profile", type=Path, required=True, help="Profile YAML/JSON")
    tailor_parser.add_argument(
        "--job-file",
        type=Path,
        required=True,
        help="Job description text file ('-' for stdin)",
    )
    tailor_parser.add_argument(
        "--pdf",
        type=Path,
        default=None,
        help="Also render the tailored resume to this PDF path",
    )

    generate_parser = subparsers.add_parser(
        "generate",
        help="Run the full pipeline for one candidate",
    )
    generate_parser.add_argument("--email", type=str, default=None, help="Candidate email")
    generate_parser.add_argument("--phone", type=str, default=None, help="Candidate phone")
    generate_parser.add_argument(
        "--job-file",
        type=Path,
        required=True,
        help="Job description text file ('-' for stdin)",
    )

    chat_parser = subparsers.add_parser(
        "chat",
        help="Hold a resume conversation on the console (one message per line)",
    )
    chat_parser.add_argument(
        "--phone",
        type=str,
        default=DEFAULT_CHAT_PHONE,
        help="Phone identity for the conversation",
    )
    chat_parser.add_argument("--name", type=str, default=None, help="Display name")

    history_parser = subparsers.add_parser("history", help="List generated resumes")
    history_parser.add_argument("owner", type=str, help="Owner id (profile id or email)")
    history_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of records (defaults to ARTIFACTS_HISTORY_LIMIT)",
    )
    history_parser.add_argument(
        "--stats",
        action="store_true",
        help="Print aggregate counts instead of records",
    )

    subparsers.add_parser("purge", help="Delete expired artifact records")

    subparsers.add_parser(
        "render-info",
        help="Show rendering strategies and remote service health",
    )

    subparsers.add_parser(
        "storage-check",
        help="Check cloud storage configuration and connectivity",
    )

    return parser


async def _analyze(parsed: argparse.Namespace) -> int:
    from src.analysis.service import JobAnalysisService

    text = _read_job_description(parsed.job_file)
    requirements = await JobAnalysisService().analyze(text)
    _write_json(requirements)
    return 0


async def _tailor(parsed: argparse.Namespace) -> int:
    from src.analysis.service import JobAnalysisService
    from src.profiles.provider import DirectoryProfileProvider
    from src.rendering.pipeline import RenderingPipeline
    from src.tailoring.engine import ResumeTailoringEngine

    profile = DirectoryProfileProvider(parsed.profile.parent).load_profile(parsed.profile)
    requirements = await JobAnalysisService().analyze(_read_job_description(parsed.job_file))
    document = ResumeTailoringEngine().tailor(profile, requirements)

    if parsed.pdf is None:
        _write_json(document)
        return 0

    artifact = await RenderingPipeline.default().render(document)
    parsed.pdf.parent.mkdir(parents=True, exist_ok=True)
    parsed.pdf.write_bytes(artifact.data)
    print(f"Wrote: {parsed.pdf} ({artifact.size_bytes} bytes via {artifact.strategy})")
    return 0


async def _generate(parsed: argparse.Namespace, settings: Settings) -> int:
    from src.pipeline.service import build_pipeline

    pipeline, repository = await build_pipeline(settings)
    try:
        result = await pipeline.run(
            email=parsed.email,
            phone=parsed.phone,
            job_description=_read_job_description(parsed.job_file),
        )
    finally:
        await repository.close()

    print(f"File: {result.file_name}")
    print(f"URL: {result.url}")
    print(f"Renderer: {result.artifact.strategy}")
    if result.used_fallback_url:
        print("Note: cloud upload failed; serving the local copy")
    print("Skills: " + ", ".join(f"{s.name} ({s.priority.value})" for s in result.document.skills))
    return 0


async def _chat(parsed: argparse.Namespace, settings: Settings) -> int:
    from src.conversation.machine import ConversationStateMachine
    from src.messaging.gateway import ConsoleMessagingGateway
    from src.messaging.models import InboundMessage
    from src.messaging.notifier import RegistrationNotifier
    from src.pipeline.service import build_pipeline

    pipeline, repository = await build_pipeline(settings)
    machine = ConversationStateMachine(
        pipeline,
        ConsoleMessagingGateway(),
        notifier=RegistrationNotifier(),
    )
    machine.start()
    print("Type messages and press Enter. Ctrl-D to quit.", file=sys.stderr)

    try:
        while True:
            line = await asyncio.to_thread(sys.stdin.readline)
            if not line:
                break
            if not line.strip():
                continue
            await machine.handle(
                InboundMessage(identity=parsed.phone, raw_text=line, display_name=parsed.name)
            )
    finally:
        await machine.stop()
        await repository.close()
    return 0


async def _history(parsed: argparse.Namespace, settings: Settings) -> int:
    from src.artifacts.recorder import ArtifactRecorder
    from src.artifacts.repository import ArtifactRepository

    repository = ArtifactRepository(settings.artifact_db_path)
    await repository.initialize()
    try:
        recorder = ArtifactRecorder(repository)
        if parsed.stats:
            stats = await recorder.owner_stats(parsed.owner)
            print(f"Resumes: {stats.total_artifacts}")
            print(f"Downloads: {stats.total_downloads}")
            print(f"Shares: {stats.total_shares}")
            if stats.last_generated_at:
                print(f"Last generated: {stats.last_generated_at:%Y-%m-%d %H:%M}")
            return 0

        records = await recorder.list_by_owner(parsed.owner, parsed.limit)
    finally:
        await repository.close()

    if not records:
        print(f"No resumes for {parsed.owner}")
        return 0
    for record in records:
        title = record.job_title or "untitled"
        print(f"{record.created_at:%Y-%m-%d %H:%M}  {record.file_name}  [{title}]")
        print(f"    {record.url}")
    return 0


async def _purge(settings: Settings) -> int:
    from src.artifacts.recorder import ArtifactRecorder
    from src.artifacts.repository import ArtifactRepository
    from src.storage.uploader import StorageUploader

    repository = ArtifactRepository(settings.artifact_db_path)
    await repository.initialize()
    try:
        removed = await ArtifactRecorder(repository, storage=StorageUploader()).purge_expired()
    finally:
        await repository.close()
    print(f"Purged {removed} expired record(s)")
    return 0


async def _render_info() -> int:
    from src.rendering.pipeline import RenderingPipeline
    from src.rendering.remote import RemoteStrategy

    pipeline = RenderingPipeline.default()
    for strategy in pipeline.strategies:
        if isinstance(strategy, RemoteStrategy) and strategy.configured:
            await strategy.health_check(force=True)
    _write_json(pipeline.describe())
    return 0


async def _storage_check() -> int:
    from src.storage.config import get_storage_config
    from src.storage.provider import BunnyStorageProvider

    config = get_storage_config()
    missing = config.missing_settings()
    if missing:
        print("Cloud storage not configured. Missing: " + ", ".join(missing))
        print(f"Uploads will be served locally from {config.local_dir}")
        return 1

    status = await BunnyStorageProvider(config).test_connection()
    _write_json(status)
    return 0 if status.get("success") else 1


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    # Load settings
    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Configure logging
    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level, log_file=settings.log_file)

    # If no mode specified, show help
    if parsed.mode is None:
        parser.print_help()
        return 0

    logger.info(f"Resume Relay v{__version__} running {parsed.mode}")

    from src.errors import NotFoundError, RenderError

    try:
        if parsed.mode == "analyze":
            return asyncio.run(_analyze(parsed))
        if parsed.mode == "tailor":
            return asyncio.run(_tailor(parsed))
        if parsed.mode == "generate":
            if not parsed.email and not parsed.phone:
                print("Error: --email or --phone is required", file=sys.stderr)
                return 1
            return asyncio.run(_generate(parsed, settings))
        if parsed.mode == "chat":
            return asyncio.run(_chat(parsed, settings))
        if parsed.mode == "history":
            return asyncio.run(_history(parsed, settings))
        if parsed.mode == "purge":
            return asyncio.run(_purge(settings))
        if parsed.mode == "render-info":
            return asyncio.run(_render_info())
        if parsed.mode == "storage-check":
            return asyncio.run(_storage_check())
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except NotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except RenderError as e:
        print(f"Error: {e}", file=sys.stderr)
        for name, error in e.failures:
            print(f"- {name}: {error}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
