import argparse
import contextlib
import json
import sys
from dataclasses import asdict
from pathlib import Path

from dotenv import load_dotenv

from lineup.config import CATALOGS, Config
from lineup.constants import setup_logging
from lineup.errors import LineupError
from lineup.service import LineupResult, LineupService, create_catalog


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find performers in festival poster text and their top tracks")
    parser.add_argument("input", nargs="?", help="Text file to read (default: stdin)")
    parser.add_argument("--catalog", choices=CATALOGS, help="Music catalog to search")
    parser.add_argument("--env-file", default=".env", help="Path to .env file with credentials")
    parser.add_argument("--no-tracks", action="store_true", help="Only list artists, skip track lookups")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--workers", type=int, help="Parallel track lookups")
    parser.add_argument("--timeout", type=float, help="Seconds before a catalog call counts as failed")
    parser.add_argument("--retries", type=int, help="Attempts per failed artist search (1 = no retry)")
    parser.add_argument("--require-auth", action="store_true", help="Stop if catalog access is not granted")
    parser.add_argument("--save-config", action="store_true", help="Store the given options as defaults")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def load_environment(env_file: str) -> None:
    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(env_path)


def build_config(args: argparse.Namespace) -> Config:
    config = Config.load()
    if args.catalog:
        config.catalog = args.catalog
    if args.workers is not None:
        config.track_workers = args.workers
    if args.timeout is not None:
        config.lookup_timeout = args.timeout
    if args.retries is not None:
        config.retry_attempts = args.retries
    if args.require_auth:
        config.require_authorization = True
    return config.validate()


def read_text(path: str | None) -> str:
    if path:
        return Path(path).read_text(encoding="utf-8")
    return sys.stdin.read()


def print_result(result: LineupResult, as_json: bool) -> None:
    if as_json:
        payload = [
            {"artist": asdict(entry.artist), "songs": [asdict(song) for song in entry.songs]}
            for entry in result.lineup
        ]
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        for entry in result.lineup:
            titles = ", ".join(song.title for song in entry.songs)
            print(f"{entry.artist.name}: {titles}" if titles else entry.artist.name)

    if result.failed:
        queries = ", ".join(f"'{f.query}'" for f in result.failed)
        print(f"Lookups failed for: {queries}", file=sys.stderr)
    if result.cancelled:
        print("Run was cancelled, results are partial", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)
    load_environment(args.env_file)

    try:
        config = build_config(args)
        if args.save_config:
            config.save()
        # Sign-in prompts need a terminal and must stay out of the result output
        interactive = args.input is not None or sys.stdin.isatty()
        service = LineupService(create_catalog(config, interactive=interactive), config)
        with contextlib.redirect_stdout(sys.stderr):
            authorization = service.ensure_authorized()
        text = read_text(args.input)
        result = service.run(text, with_tracks=not args.no_tracks, authorization=authorization)
    except LineupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_result(result, args.json)
    print(f"Found {len(result.artists)} artists", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
