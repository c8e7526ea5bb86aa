"""Fans the lecture list out over several browser tabs."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol, Sequence, Tuple, TypeVar

from ..models import Chapter, CourseStructure, HarvestReport, Lecture
from ..utils.browser import BrowserPage
from .transcript_downloader import LectureTranscriptDownloader

T = TypeVar("T")
LectureJob = Tuple[Optional[Chapter], Lecture]


class PageFactory(Protocol):
    async def new_page(self) -> BrowserPage: ...


def partition_round_robin(items: Sequence[T], tab_count: int) -> List[List[T]]:
    """Deals ``items`` out like cards: partition ``i`` gets items ``i, i+n, i+2n, ...``."""

    if tab_count < 1:
        raise ValueError("tab_count must be at least 1")
    partitions: List[List[T]] = [[] for _ in range(tab_count)]
    for index, item in enumerate(items):
        partitions[index % tab_count].append(item)
    return partitions


class TranscriptHarvester:
    """Processes every lecture, one sequential queue per tab, all tabs concurrently."""

    def __init__(self, session: PageFactory, downloader: LectureTranscriptDownloader, tab_count: int = 5) -> None:
        if tab_count < 1:
            raise ValueError("tab_count must be at least 1")
        self._session = session
        self._downloader = downloader
        self.tab_count = tab_count

    async def run(self, structure: CourseStructure) -> HarvestReport:
        jobs: List[LectureJob] = list(structure.all_lectures())
        partitions = partition_round_robin(jobs, self.tab_count)
        report = HarvestReport()
        logging.info("Downloading %s lectures across %s tabs", len(jobs), self.tab_count)

        await asyncio.gather(
            *(
                self._run_tab(tab_index, partition, report)
                for tab_index, partition in enumerate(partitions, start=1)
                if partition
            )
        )

        logging.info(
            "Finished: %s saved, %s skipped, %s without transcript, %s empty, %s failed",
            report.saved,
            report.skipped,
            report.no_transcript,
            report.empty,
            report.failed,
        )
        return report

    async def _run_tab(self, tab_index: int, jobs: List[LectureJob], report: HarvestReport) -> None:
        page = await self._session.new_page()
        logging.info("[Tab %s] processing %s lectures...", tab_index, len(jobs))
        try:
            for chapter, lecture in jobs:
                if chapter is not None:
                    logging.debug("[Tab %s] chapter %s: %s", tab_index, chapter.index, chapter.title)
                outcome = await self._downloader.process(page, lecture)
                report.record(lecture, outcome)
        finally:
            try:
                await page.close()
            except Exception as exc:
                logging.debug("[Tab %s] page close failed: %s", tab_index, exc)
        logging.info("[Tab %s] done.", tab_index)
