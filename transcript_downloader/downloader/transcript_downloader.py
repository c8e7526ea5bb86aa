"""Drives the lecture player UI to save one lecture's transcript and captions."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from pydantic import BaseModel

from ..models import CaptionTrack, Lecture, LectureOutcome
from ..utils.browser import BrowserPage
from ..utils.file_utils import OutputStore, sanitize_filename, subtitle_filename, transcript_filename
from .subtitle_converter import convert_vtt_to_srt

TRANSCRIPT_TOGGLE_SELECTORS: List[str] = [
    'button[data-purpose="transcript-toggle"]',
    '[data-purpose="transcript-toggle"]',
    'button:has-text("Transcript")',
    ".transcript-toggle",
    '[aria-label*="transcript" i]',
    'button[aria-label*="transcript" i]',
]
TRANSCRIPT_PANEL_SELECTOR = '[data-purpose="transcript-panel"]'
VIDEO_SELECTOR = "video"
NO_TRANSCRIPT_NOTICE = "[No transcript available or could not be accessed]"


class SettleDelays(BaseModel):
    """Fixed waits (seconds) and timeouts (milliseconds) used while scraping a lecture."""

    navigation_timeout_ms: int = 60000
    video_timeout_ms: int = 30000
    after_navigation: float = 2.0
    after_click: float = 1.5
    after_panel_open: float = 2.0
    text_retry_interval: float = 1.0
    text_attempts: int = 3
    after_transcript: float = 0.5
    after_lecture: float = 1.0


def lecture_url(course_url: str, lecture: Lecture) -> str:
    return f"{course_url.rstrip('/')}/learn/lecture/{lecture.id}"


class LectureTranscriptDownloader:
    """Runs the per-lecture protocol; every failure stays inside ``process``."""

    def __init__(
        self,
        store: OutputStore,
        course_url: str,
        download_srt: bool = False,
        delays: Optional[SettleDelays] = None,
    ) -> None:
        self.store = store
        self.course_url = course_url
        self.download_srt = download_srt
        self.delays = delays or SettleDelays()

    async def process(self, page: BrowserPage, lecture: Lecture) -> LectureOutcome:
        name = sanitize_filename(lecture.display_name, default=f"lecture_{lecture.id}")
        transcript_name = transcript_filename(name)
        logging.info("Processing lecture: %s", name)

        try:
            if self.store.exists(transcript_name):
                logging.info("Skipping (already exists): %s", name)
                return LectureOutcome.SKIPPED

            await self._open_player(page, lecture)

            if not await self._open_transcript_panel(page):
                logging.info(
                    "No transcript button found/clicked for lecture: %s. This lecture might not have a transcript.",
                    lecture.title,
                )
                self.store.write_text(transcript_name, f"# {name}\n\n{NO_TRANSCRIPT_NOTICE}")
                logging.info("Created placeholder file for: %s", name)
                return LectureOutcome.NO_TRANSCRIPT

            await asyncio.sleep(self.delays.after_panel_open)
            text = await self._read_transcript(page)
            if not text:
                logging.info("No transcript content available for lecture: %s", lecture.title)
                return LectureOutcome.EMPTY

            self.store.write_text(transcript_name, f"# {name}\n\n{text}")
            logging.info("Transcript saved for: %s", name)
            await asyncio.sleep(self.delays.after_transcript)

            if self.download_srt:
                if lecture.captions:
                    await self._save_captions(page, name, lecture.captions)
                else:
                    logging.info("No captions found for %s", name)

            await asyncio.sleep(self.delays.after_lecture)
            return LectureOutcome.SAVED
        except Exception as exc:
            logging.error("Error processing lecture %s: %s", lecture.title, exc)
            return LectureOutcome.FAILED

    async def _open_player(self, page: BrowserPage, lecture: Lecture) -> None:
        await page.goto(
            lecture_url(self.course_url, lecture),
            wait_until="networkidle",
            timeout_ms=self.delays.navigation_timeout_ms,
        )
        if not await page.wait_for_visible(VIDEO_SELECTOR, self.delays.video_timeout_ms):
            logging.info("Note: video player not fully loaded for lecture: %s, continuing anyway", lecture.title)
        await asyncio.sleep(self.delays.after_navigation)

    async def _open_transcript_panel(self, page: BrowserPage) -> bool:
        for selector in TRANSCRIPT_TOGGLE_SELECTORS:
            try:
                if not await page.has_element(selector):
                    continue
                logging.debug("Found transcript button using selector: %s", selector)
                await page.click(selector)
                await asyncio.sleep(self.delays.after_click)
                if await page.is_visible(TRANSCRIPT_PANEL_SELECTOR):
                    logging.debug("Transcript panel opened via %s", selector)
                    return True
                logging.debug("Button %s clicked but panel did not appear, trying next selector", selector)
            except Exception as exc:
                logging.debug("Error with selector %s: %s", selector, exc)
        return False

    async def _read_transcript(self, page: BrowserPage) -> str:
        attempts = self.delays.text_attempts
        for attempt in range(1, attempts + 1):
            text = (await page.text_of(TRANSCRIPT_PANEL_SELECTOR) or "").strip()
            if text:
                return text
            logging.info("Retry %s/%s to get transcript...", attempt, attempts)
            await asyncio.sleep(self.delays.text_retry_interval)
        return ""

    async def _save_captions(self, page: BrowserPage, name: str, captions: List[CaptionTrack]) -> None:
        for caption in captions:
            locale = caption.locale_id or "unknown"
            try:
                vtt = await page.fetch_text(caption.url)
                self.store.write_text(subtitle_filename(name, caption.locale_id), convert_vtt_to_srt(vtt))
                logging.info("SRT saved: %s [%s]", name, locale)
            except Exception as exc:
                logging.warning("Error downloading caption [%s] for %s: %s", locale, name, exc)
