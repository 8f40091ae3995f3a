"""
Command-line interface for the podcast catcher.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .errors import PodcatcherError
from .factory import create_manager


def default_podcast_root() -> str:
    """Podcast root from $PODCAST_DIR, falling back to ~/Podcasts."""
    return os.getenv("PODCAST_DIR") or os.path.join(
        os.path.expanduser("~"), "Podcasts"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="podcatcher",
        description="Subscribe to podcasts and download new episodes",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Podcast directory (default: $PODCAST_DIR or ~/Podcasts)",
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="Disable progress bars"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    subscribe = commands.add_parser("subscribe", help="Subscribe to a feed")
    subscribe.add_argument("url", help="URL of the podcast RSS feed")

    commands.add_parser("ls", help="List subscriptions")

    episodes = commands.add_parser(
        "episodes", help="List a podcast's episodes"
    )
    episodes.add_argument("title", help="Podcast title")

    download = commands.add_parser("download", help="Download episodes")
    download.add_argument("title", help="Podcast title")
    download.add_argument(
        "numbers",
        nargs="*",
        type=int,
        help="Episode numbers (1 = oldest); all missing episodes if omitted",
    )

    fetch = commands.add_parser(
        "fetch", help="Download all missing episodes of any feed URL"
    )
    fetch.add_argument("url", help="URL of the podcast RSS feed")

    commands.add_parser("refresh", help="Check all feeds for new episodes")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        manager = create_manager(
            args.root or default_podcast_root(),
            show_progress=not args.no_progress,
        )

        if args.command == "subscribe":
            podcast = manager.subscribe(args.url)
            print(f"Subscribed: {podcast.title}")
        elif args.command == "ls":
            for sub in manager.list_subscriptions():
                print(f"{sub.title} ({sub.num_episodes} episodes)")
        elif args.command == "episodes":
            for number, title in manager.list_episodes(args.title):
                print(f"({number}) {title}")
        elif args.command == "download":
            if args.numbers:
                manager.download_selected(args.title, args.numbers)
            else:
                manager.download_all(args.title)
        elif args.command == "fetch":
            manager.download_url(args.url)
        elif args.command == "refresh":
            manager.refresh()

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except PodcatcherError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
