"""
Shared pytest fixtures: in-memory stand-ins for the browser tab and session.
Tests drive coroutines with asyncio.run, so no real browser is launched.
"""

from typing import Any, Callable, Dict, List, Optional

import pytest

from transcript_downloader.downloader.transcript_downloader import SettleDelays
from transcript_downloader.models import CaptionTrack, Lecture
from transcript_downloader.utils.file_utils import OutputStore


class FakePage:
    """Records navigation and answers DOM queries from canned data."""

    def __init__(
        self,
        bodies: Optional[Dict[str, str]] = None,
        scripts: Optional[Dict[str, Any]] = None,
        json_responses: Optional[Dict[str, Any]] = None,
        elements: Optional[List[str]] = None,
        panel_openers: Optional[List[str]] = None,
        transcript_texts: Optional[List[str]] = None,
        captions: Optional[Dict[str, Any]] = None,
        video_visible: bool = True,
        goto_hook: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        self.bodies = bodies or {}
        self.scripts = scripts or {}
        self.json_responses = json_responses or {}
        self.elements = set(elements or [])
        self.panel_openers = set(panel_openers or [])
        self.transcript_texts = list(transcript_texts or [])
        self.captions = captions or {}
        self.video_visible = video_visible
        self.goto_hook = goto_hook

        self.visited: List[str] = []
        self.clicked: List[str] = []
        self.fetched: List[str] = []
        self.text_reads = 0
        self.panel_visible = False
        self.closed = False
        self.current_url: Optional[str] = None

    async def goto(self, url: str, wait_until: str = "networkidle", timeout_ms: int = 60000) -> None:
        self.visited.append(url)
        if self.goto_hook is not None:
            self.goto_hook(url, wait_until)
        self.current_url = url
        self.panel_visible = False

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        result = self.scripts.get(expression)
        if isinstance(result, Exception):
            raise result
        return result

    async def body_text(self) -> str:
        return self.bodies.get(self.current_url, "")

    async def wait_for_visible(self, selector: str, timeout_ms: int) -> bool:
        return self.video_visible

    async def has_element(self, selector: str) -> bool:
        return selector in self.elements

    async def click(self, selector: str) -> None:
        self.clicked.append(selector)
        if selector in self.panel_openers:
            self.panel_visible = True

    async def is_visible(self, selector: str) -> bool:
        return self.panel_visible

    async def text_of(self, selector: str) -> str:
        self.text_reads += 1
        if not self.transcript_texts:
            return ""
        if len(self.transcript_texts) == 1:
            return self.transcript_texts[0]
        return self.transcript_texts.pop(0)

    async def fetch_text(self, url: str) -> str:
        self.fetched.append(url)
        content = self.captions[url]
        if isinstance(content, Exception):
            raise content
        return content

    async def fetch_json(self, url: str) -> Any:
        self.fetched.append(url)
        return self.json_responses.get(url)

    async def close(self) -> None:
        self.closed = True


class FakeSession:
    """Hands out FakePage tabs built by ``page_factory``."""

    def __init__(self, page_factory: Callable[[], FakePage]) -> None:
        self.page_factory = page_factory
        self.pages: List[FakePage] = []

    async def new_page(self) -> FakePage:
        page = self.page_factory()
        self.pages.append(page)
        return page


def make_lecture(
    lecture_id: int,
    title: str,
    lecture_index: int,
    chapter_index: Optional[int] = 1,
    captions: Optional[List[CaptionTrack]] = None,
) -> Lecture:
    return Lecture(
        id=lecture_id,
        title=title,
        created="2021-03-04T10:00:00Z",
        duration_seconds=300,
        chapter_index=chapter_index,
        lecture_index=lecture_index,
        captions=captions or [],
    )


@pytest.fixture
def instant_delays():
    """Delays with every wait set to zero."""
    return SettleDelays(
        after_navigation=0,
        after_click=0,
        after_panel_open=0,
        text_retry_interval=0,
        after_transcript=0,
        after_lecture=0,
    )


@pytest.fixture
def store(tmp_path):
    return OutputStore(str(tmp_path / "output"))


@pytest.fixture
def transcript_page():
    """A tab whose first selector opens a populated transcript panel."""

    def factory(**overrides) -> FakePage:
        options = {
            "elements": ['button[data-purpose="transcript-toggle"]'],
            "panel_openers": ['button[data-purpose="transcript-toggle"]'],
            "transcript_texts": ["Hello and welcome to the course."],
        }
        options.update(overrides)
        return FakePage(**options)

    return factory


@pytest.fixture
def sample_curriculum():
    """Raw listing results in the shape returned by the curriculum endpoint."""
    return [
        {"_class": "chapter", "id": 10, "title": "Getting Started", "sort_order": 100},
        {
            "_class": "lecture",
            "id": 101,
            "title": "Welcome",
            "sort_order": 99,
            "created": "2021-03-04T10:00:00Z",
            "asset": {
                "asset_type": "Video",
                "time_estimation": 125,
                "captions": [
                    {"url": "https://cdn.example.com/101-en.vtt", "locale_id": "en_US"},
                    {"url": "", "locale_id": "de_DE"},
                ],
            },
        },
        {
            "_class": "lecture",
            "id": 102,
            "title": "Reading list",
            "sort_order": 98,
            "asset": {"asset_type": "Article", "time_estimation": 60},
        },
        {"_class": "quiz", "id": 103, "title": "Check yourself", "sort_order": 97},
        {"_class": "chapter", "id": 20, "title": "Deep Dive", "sort_order": 96},
        {
            "_class": "lecture",
            "id": 201,
            "title": "Internals",
            "sort_order": 95,
            "created": "2021-05-06T08:30:00Z",
            "asset": {"asset_type": "PremiumVideo", "time_estimation": 610},
        },
        {"_class": "practice", "id": 202, "title": "Exercise", "sort_order": 94},
    ]
