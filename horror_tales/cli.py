"""
Horror Tales CLI.

Commands:
- generate: Run the generation pipeline once and print the story
- list: Print one archive page
- speak: Narrate text to an MP3 file
"""

import argparse
import logging
import math
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from horror_tales.infra.logging_config import setup_logging
from horror_tales.infra.settings import LENGTH_BANDS, get_settings
from horror_tales.story.audio import VALID_VOICES

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Horror story generation CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser("generate", help="Generate a story")
    gen_parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Text model. Format: 'gpt-4o-mini', 'openai:<model>', 'claude-...' or 'anthropic:<model>'"
    )
    gen_parser.add_argument(
        "--length",
        choices=sorted(LENGTH_BANDS),
        default=None,
        help="Story length band: short (600-900 chars) or long (1200-1500 chars)"
    )

    list_parser = subparsers.add_parser("list", help="List archived stories")
    list_parser.add_argument("--theme", type=str, default=None, help="Exact theme filter")
    list_parser.add_argument("--page", type=int, default=1, help="1-based page number")
    list_parser.add_argument("--page-size", type=int, default=5, help="Stories per page")

    speak_parser = subparsers.add_parser("speak", help="Narrate text to an MP3 file")
    speak_parser.add_argument("text", type=str, help="Text to narrate")
    speak_parser.add_argument(
        "--voice",
        type=str,
        default="onyx",
        help=f"Voice id ({', '.join(VALID_VOICES)})"
    )
    speak_parser.add_argument("--output", type=str, default="story.mp3", help="Output file path")

    return parser


def main(argv=None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir)

    commands = {
        "generate": run_generate,
        "list": run_list,
        "speak": run_speak,
    }
    try:
        return commands[args.command](args)
    except Exception as e:
        logger.error(f"[CLI] {args.command} failed: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def run_generate(args) -> int:
    """Execute one generation run."""
    from horror_tales.registry.story_registry import StoryRegistry
    from horror_tales.story.generator import StoryGenerator
    from horror_tales.story.model_provider import get_model_info, get_provider

    settings = get_settings()
    if args.length:
        settings = replace(settings, story_length=args.length)

    info = get_model_info(args.model or settings.story_model)
    logger.info("=" * 80)
    logger.info("[CLI] Story Generation Started")
    logger.info(f"[CLI] Model: {info.model_name} ({info.provider})")
    logger.info(f"[CLI] Length: {settings.story_length} {settings.length_band}")
    logger.info("=" * 80)

    registry = StoryRegistry(settings.db_path)
    try:
        generator = StoryGenerator(
            registry,
            provider=get_provider(info.full_spec),
            settings=settings,
        )
        story = generator.generate()
    finally:
        registry.close()

    print("\n" + "=" * 80)
    print(story.title)
    print("=" * 80)
    print(f"Theme: {story.theme}")
    print(f"ID: {story.id}{' (not saved: duplicate content)' if story.is_ephemeral else ''}")
    print()
    print(story.content)
    return 0


def run_list(args) -> int:
    """Print an archive page."""
    from horror_tales.registry.story_registry import StoryRegistry

    if args.page < 1 or args.page_size < 1:
        print("Error: --page and --page-size must be >= 1", file=sys.stderr)
        return 1

    registry = StoryRegistry(get_settings().db_path)
    try:
        stories, total = registry.list_stories(
            theme=args.theme,
            offset=(args.page - 1) * args.page_size,
            limit=args.page_size,
        )
    finally:
        registry.close()

    total_pages = math.ceil(total / args.page_size) if total else 0
    print(f"Page {args.page}/{total_pages} - {total} stories")
    for story in stories:
        print(f"- [{story.created_at}] {story.title} ({story.theme}) {story.id}")
    return 0


def run_speak(args) -> int:
    """Narrate text to a file."""
    from horror_tales.story.audio import AudioSynthesizer

    audio = AudioSynthesizer().synthesize(args.text, args.voice)
    output = Path(args.output)
    output.write_bytes(audio)
    print(f"Wrote {len(audio)} bytes to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
