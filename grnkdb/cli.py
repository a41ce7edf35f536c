"""Command line front end: scrape-youtube, convert, export-csv."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from .commands import ScrapeError, convert_csv_to_games, export_games_csv, scrape_youtube
from .config import AppConfig, ConfigError, load_config
from .converter.video_to_game import VideoToGameConverter
from .integrations.steam import GameNameCache, SteamClient
from .integrations.youtube_channels import YouTubeError, YouTubeScraper
from .logging_utils import configure_logging

logger = logging.getLogger(__name__)

COMMANDS = ("scrape-youtube", "convert", "export-csv")


def _scrape(config: AppConfig, args: argparse.Namespace) -> int:
    try:
        scraper = YouTubeScraper(
            args.api_key or config.youtube_api_key_value,
            page_results=config.youtube_page_results,
            page_limit=config.youtube_page_limit,
        )
    except YouTubeError as exc:
        logger.error("Cannot scrape YouTube: %s", exc)
        return 2
    channel_ids = args.channel_ids or list(config.youtube_channel_ids)
    output_dir = Path(args.output) if args.output else config.data_dir
    try:
        written = scrape_youtube(scraper, output_dir, channel_ids)
    except ScrapeError as exc:
        for failure in exc.failures:
            logger.error("%s", failure)
        logger.error("Scrape finished with %d failed channels", len(exc.failures))
        return 1
    logger.info("Scraped %d channels into %s", len(written), output_dir)
    return 0


def _convert(config: AppConfig, args: argparse.Namespace) -> int:
    window_size = args.window_size if args.window_size is not None else config.window_size
    window_step = args.window_step if args.window_step is not None else config.window_step
    cache = GameNameCache()
    with SteamClient(
        cache=cache,
        base_url=config.steam_base_url,
        retry_attempts=config.steam_retry_attempts,
        retry_delay_seconds=config.steam_retry_delay_seconds,
        timeout_seconds=config.steam_timeout_seconds,
    ) as steam:
        converter = VideoToGameConverter(steam, window_size=window_size, window_step=window_step)
        input_dir = Path(args.input) if args.input else config.data_dir
        output_path = Path(args.output) if args.output else config.catalog_path
        games = convert_csv_to_games(converter, input_dir, output_path)
    logger.info("Steam lookups: %d resolved, %d cache hits", len(cache), cache.hits)
    if games is not None:
        logger.info("Catalog %s holds %d games", output_path, len(games))
    return 0


def _export(config: AppConfig, args: argparse.Namespace) -> int:
    catalog_path = Path(args.input) if args.input else config.catalog_path
    csv_path = Path(args.output) if args.output else config.catalog_csv_path
    export_games_csv(catalog_path, csv_path, config.known_sources)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="grnkdb", description="Game catalog built from let's-play uploads")
    parser.add_argument("--env-file", type=Path, help="Read settings from this .env file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to the console")
    commands = parser.add_subparsers(dest="command", required=True)

    scrape = commands.add_parser("scrape-youtube", help="Dump YouTube channel uploads to CSV files")
    scrape.add_argument("channel_ids", nargs="*", help="Channel IDs (default: configured channels)")
    scrape.add_argument("--api-key", help="YouTube Data API key")
    scrape.add_argument("--output", help="Directory for the CSV files")
    scrape.set_defaults(handler=_scrape)

    convert = commands.add_parser("convert", help="Convert video CSV files into the game catalog")
    convert.add_argument("--input", help="Directory containing video CSV files")
    convert.add_argument("--output", help="Catalog JSON file")
    convert.add_argument("--window-size", type=int, help="Videos per clustering window")
    convert.add_argument("--window-step", type=int, help="Videos to advance between windows")
    convert.set_defaults(handler=_convert)

    export = commands.add_parser("export-csv", help="Render the catalog as a CSV table")
    export.add_argument("--input", help="Catalog JSON file")
    export.add_argument("--output", help="CSV file to write")
    export.set_defaults(handler=_export)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.env_file)
    except ConfigError as exc:
        logging.basicConfig(level=logging.ERROR)
        logger.error("%s", exc)
        return 2
    configure_logging(config, verbose=args.verbose, command=args.command)
    try:
        return args.handler(config, args)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
