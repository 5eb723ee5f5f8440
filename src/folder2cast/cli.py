"""
Command-line interface for building podcast feeds from audio folders.
"""

import argparse
import logging
import sys
from typing import List, Optional

from tqdm import tqdm

from .config import EnvConfig
from .factory import create_feed_manager, create_process_options
from .scanner import scan_sources


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build podcast RSS feeds from folders of audio files"
    )
    parser.add_argument(
        "--audio-dir", help="Folder containing one subfolder per podcast"
    )
    parser.add_argument("--base-url", help="Base URL the files are served at")
    parser.add_argument(
        "--default-cover", help="Cover URL used when none can be resolved"
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="Disable progress bars"
    )
    parser.add_argument(
        "--list-only",
        action="store_true",
        help="List podcast folders without building feeds",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point for the feed builder."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        env = EnvConfig.from_env()
        audio_dir = args.audio_dir or env.audio_dir
        print(f"Using audio directory: {audio_dir}")

        sources = scan_sources(audio_dir, env)
        if not sources:
            print("Error: no podcast folders found", file=sys.stderr)
            sys.exit(1)

        print(f"Found {len(sources)} podcast folders")
        for i, source in enumerate(sources, 1):
            print(
                f"  {i}. {source.config.title} "
                f"({source.dir_name}, {len(source.episodes)} episodes)"
            )

        if args.list_only:
            return

        manager = create_feed_manager(env)
        options = create_process_options(
            env, args.base_url, args.default_cover
        )

        summary = manager.process_sources(
            tqdm(sources, desc="Building feeds", disable=args.no_progress),
            options,
        )

        print("\nFeeds:")
        for result in summary.results:
            status = result.feed_path or "FAILED"
            print(f"  {result.feed_url} -> {status}")
        print(f"  Built: {summary.successful}, failed: {summary.failed}")

        if summary.failed > 0:
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
