from __future__ import annotations

import argparse
import asyncio
import locale
import logging
import os
import sys

from dotenv import load_dotenv

from .api.course_api import CourseResolver, course_origin
from .api.curriculum_api import CurriculumAPI, CurriculumError
from .downloader.harvester import TranscriptHarvester
from .downloader.transcript_downloader import LectureTranscriptDownloader
from .models import HarvestReport
from .utils.browser import AuthenticationError, BrowserSession
from .utils.contents import write_contents
from .utils.course_structure import build_course_structure
from .utils.file_utils import OutputStore
from .utils.prompts import ConsolePrompter, Prompter

load_dotenv()

DEFAULT_TAB_COUNT = 5


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value


def _env_int(name: str) -> int | None:
    value = _env_str(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _env_bool(name: str) -> bool:
    value = _env_str(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_optional_bool(name: str) -> bool | None:
    if _env_str(name) is None:
        return None
    return _env_bool(name)


def normalize_course_url(url: str) -> str:
    url = url.strip()
    return url if url.endswith("/") else f"{url}/"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Download lecture transcripts and subtitles from a course page.")
    parser.add_argument(
        "course_url",
        nargs="?",
        default=_env_str("COURSE_URL"),
        help="Course URL, e.g. https://www.udemy.com/course/your-course-name/",
    )
    parser.add_argument("--output-dir", default=_env_str("OUTPUT_DIR") or "output", help="Directory for transcripts")
    parser.add_argument(
        "--srt",
        dest="download_srt",
        action=argparse.BooleanOptionalAction,
        default=_env_optional_bool("DOWNLOAD_SRT"),
        help="Also save captions as .srt files (asked interactively when omitted)",
    )
    parser.add_argument(
        "--tabs",
        type=int,
        default=_env_int("TAB_COUNT"),
        help=f"Number of browser tabs used in parallel (asked interactively when omitted, default {DEFAULT_TAB_COUNT})",
    )
    parser.add_argument("--headless", action="store_true", default=_env_bool("HEADLESS"), help="Run the browser headless")
    parser.add_argument("--verbose", action="store_true", default=_env_bool("VERBOSE"), help="Enable debug logging")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def configure_locale() -> str | None:
    """Uses the user's locale for dates in CONTENTS.txt; keeps C if it is unavailable."""

    try:
        return locale.setlocale(locale.LC_TIME, "")
    except locale.Error as exc:
        logging.debug("Could not apply system locale: %s", exc)
        return None


def resolve_options(args: argparse.Namespace, prompter: ConsolePrompter) -> tuple[bool, int]:
    download_srt = args.download_srt
    if download_srt is None:
        download_srt = prompter.ask_yes_no(
            "Do you want to download transcripts as .srt files with timestamps as well? (yes/no) [no]: ",
            default=False,
        )
    tab_count = args.tabs
    if tab_count is None:
        tab_count = prompter.ask_int(
            f"How many tabs do you want to use for downloading transcripts? [{DEFAULT_TAB_COUNT}]: ",
            default=DEFAULT_TAB_COUNT,
        )
    if tab_count < 1:
        raise ValueError("Tab count must be at least 1")
    return download_srt, tab_count


async def run(
    course_url: str,
    store: OutputStore,
    prompter: Prompter,
    download_srt: bool,
    tab_count: int,
    headless: bool = False,
) -> HarvestReport:
    async with BrowserSession(headless=headless) as session:
        page = await session.new_page()
        logging.info("Opening course page for manual login...")
        course_id = await CourseResolver(page, prompter).resolve(course_url)
        logging.info("Course ID: %s", course_id)

        logging.info("Fetching course content...")
        items = await CurriculumAPI(page, course_origin(course_url)).fetch_items(course_id)
        logging.info("Fetched %s curriculum items.", len(items))

        structure = build_course_structure(items)
        logging.info(
            "Course has %s chapters and %s video lectures.",
            len(structure.chapters),
            structure.lecture_count,
        )
        write_contents(structure, store)
        await page.close()

        downloader = LectureTranscriptDownloader(store, course_url, download_srt=download_srt)
        return await TranscriptHarvester(session, downloader, tab_count=tab_count).run(structure)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(args.verbose)
    configure_locale()

    if not args.course_url:
        logging.error("Please provide a course URL, e.g. https://www.udemy.com/course/your-course-name")
        sys.exit(1)

    course_url = normalize_course_url(args.course_url)
    logging.info("Course URL: %s", course_url)

    prompter = ConsolePrompter()
    try:
        download_srt, tab_count = resolve_options(args, prompter)
    except ValueError as exc:
        logging.error("Invalid tab count: %s", exc)
        sys.exit(1)

    store = OutputStore(args.output_dir)
    try:
        report = asyncio.run(run(course_url, store, prompter, download_srt, tab_count, headless=args.headless))
    except (AuthenticationError, CurriculumError) as exc:
        logging.error("Error: %s", exc)
        sys.exit(1)
    except Exception as exc:
        logging.error("Fatal error occurred: %s", exc)
        sys.exit(1)

    if report.failed:
        logging.warning("Lectures that failed (re-run to retry): %s", ", ".join(report.failed_titles))
    logging.info("All transcripts have been downloaded to %s", os.path.abspath(args.output_dir))


if __name__ == "__main__":
    main()
