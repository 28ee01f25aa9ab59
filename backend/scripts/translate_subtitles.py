#!/usr/bin/env python3
"""
Translate a subtitle document from the command line.

Runs one job through the same pipeline controller and cache database as the
API server, so an interrupted run resumes where it stopped.

Usage:
    cd backend
    python scripts/translate_subtitles.py episode-01 ko episode01.vtt --target uk

    # Source may also be a URL:
    python scripts/translate_subtitles.py episode-01 ko https://example.com/ep1.vtt

    # Show the cached status only:
    python scripts/translate_subtitles.py episode-01 ko --status
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from subtrans.config import settings
from subtrans.core.cache import CacheStore
from subtrans.core.translation.models import ContentKey, TranslationJob
from subtrans.core.translation.orchestrator import PipelineController
from subtrans.models.database.base import async_session_maker, engine, init_db
from subtrans.models.database.enums import SessionStatus


def build_job(args: argparse.Namespace, key: ContentKey) -> TranslationJob:
    """Build the job from the source argument (URL or local file)."""
    if args.source.startswith(("http://", "https://")):
        return TranslationJob(key=key, subtitle_url=args.source, api_key=args.api_key)
    document = Path(args.source).read_text(encoding="utf-8")
    return TranslationJob(key=key, document=document, api_key=args.api_key)


async def show_status(store: CacheStore, key: ContentKey) -> int:
    status = await store.status(key)
    print(f"{key}")
    if not status.exists:
        print("  No cached translations.")
        return 0
    print(f"  Progress: {status.current}/{status.total} ({status.percent_complete}% translated)")
    print(f"  Completed: {'yes' if status.completed else 'no'}")
    return 0


async def run_job(args: argparse.Namespace) -> int:
    await init_db()
    store = CacheStore(async_session_maker)
    key = ContentKey(
        content_id=args.content_id,
        source_lang=args.source_lang,
        target_lang=args.target,
    )

    try:
        if args.status:
            return await show_status(store, key)
        if not args.source:
            print("A source file or URL is required unless --status is given.")
            return 2

        controller = PipelineController(store=store)
        queue = controller.tracker.subscribe(key.cache_key)
        task = asyncio.create_task(controller.run(build_job(args, key)))

        while not task.done() or not queue.empty():
            try:
                event = await asyncio.wait_for(queue.get(), timeout=0.5)
            except asyncio.TimeoutError:
                continue
            print(
                f"  [{event['status']}] {event['current']}/{event['total']} "
                f"({event['percent']}%), {event['translated']} translated"
            )

        session = await task
        controller.tracker.unsubscribe(key.cache_key, queue)

        if session.status == SessionStatus.ERROR:
            print(f"\nFailed: {session.error_message}")
            return 1

        print(f"\n{key}: {session.status.value}, {len(session.translations)} cues translated")

        if args.output:
            Path(args.output).write_text(
                json.dumps(session.translations, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            print(f"Translations written to {args.output}")
        return 0
    finally:
        await engine.dispose()


def main():
    parser = argparse.ArgumentParser(
        description="Translate a subtitle document with resumable caching"
    )
    parser.add_argument("content_id", help="Identifier of the content (e.g. episode id)")
    parser.add_argument("source_lang", help="Source language code (e.g. ko)")
    parser.add_argument("source", nargs="?", help="Subtitle file path or URL")
    parser.add_argument(
        "--target",
        default=settings.default_target_language,
        help=f"Target language code (default: {settings.default_target_language})",
    )
    parser.add_argument("--api-key", help="Generation endpoint API key (default: GEMINI_API_KEY)")
    parser.add_argument("--output", help="Write the translation mapping to this JSON file")
    parser.add_argument(
        "--status",
        action="store_true",
        help="Only show the cached status of this content",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(run_job(args))


if __name__ == "__main__":
    sys.exit(main())
