"""
Unit tests for the per-lecture transcript protocol.
"""

import asyncio

import pytest
from conftest import FakePage, make_lecture

from transcript_downloader.downloader.transcript_downloader import (
    NO_TRANSCRIPT_NOTICE,
    LectureTranscriptDownloader,
    lecture_url,
)
from transcript_downloader.models import CaptionTrack, LectureOutcome

COURSE_URL = "https://www.udemy.com/course/learn-python/"
VTT = "WEBVTT\n\n00:01.000 --> 00:02.000\nHello\n"


def _process(store, page, lecture, delays, download_srt=False):
    downloader = LectureTranscriptDownloader(store, COURSE_URL, download_srt=download_srt, delays=delays)
    return asyncio.run(downloader.process(page, lecture))


def _read(store, name):
    with open(store.path_for(name), encoding="utf-8") as handle:
        return handle.read()


@pytest.mark.unit
def test_transcript_is_saved_with_header(store, transcript_page, instant_delays):
    lecture = make_lecture(7, "What is Python?", lecture_index=2, chapter_index=1)
    page = transcript_page()

    outcome = _process(store, page, lecture, instant_delays)

    assert outcome is LectureOutcome.SAVED
    assert page.visited == ["https://www.udemy.com/course/learn-python/learn/lecture/7"]
    assert _read(store, "1.2 What is Python-.txt") == "# 1.2 What is Python-\n\nHello and welcome to the course."


@pytest.mark.unit
def test_standalone_lecture_name_has_no_chapter_prefix(store, transcript_page, instant_delays):
    lecture = make_lecture(8, "Intro", lecture_index=3, chapter_index=None)

    _process(store, transcript_page(), lecture, instant_delays)

    assert store.exists("3. Intro.txt")


@pytest.mark.unit
def test_existing_transcript_is_skipped_without_navigation(store, transcript_page, instant_delays):
    lecture = make_lecture(7, "Intro", lecture_index=1)
    store.write_text("1.1 Intro.txt", "previous run")
    page = transcript_page()

    first = _process(store, page, lecture, instant_delays)
    second = _process(store, page, lecture, instant_delays)

    assert first is second is LectureOutcome.SKIPPED
    assert page.visited == []
    assert page.text_reads == 0
    assert _read(store, "1.1 Intro.txt") == "previous run"


@pytest.mark.unit
def test_missing_transcript_control_writes_placeholder(store, instant_delays):
    page = FakePage(elements=[])
    lecture = make_lecture(9, "Quiz recap", lecture_index=1)

    outcome = _process(store, page, lecture, instant_delays)

    assert outcome is LectureOutcome.NO_TRANSCRIPT
    assert _read(store, "1.1 Quiz recap.txt") == f"# 1.1 Quiz recap\n\n{NO_TRANSCRIPT_NOTICE}"


@pytest.mark.unit
def test_next_selector_is_tried_when_panel_stays_hidden(store, instant_delays):
    page = FakePage(
        elements=['button[data-purpose="transcript-toggle"]', '[aria-label*="transcript" i]'],
        panel_openers=['[aria-label*="transcript" i]'],
        transcript_texts=["Some text"],
    )

    outcome = _process(store, page, make_lecture(1, "A", 1), instant_delays)

    assert outcome is LectureOutcome.SAVED
    assert page.clicked == ['button[data-purpose="transcript-toggle"]', '[aria-label*="transcript" i]']


@pytest.mark.unit
def test_missing_video_element_is_not_fatal(store, transcript_page, instant_delays):
    outcome = _process(store, transcript_page(video_visible=False), make_lecture(1, "A", 1), instant_delays)
    assert outcome is LectureOutcome.SAVED


@pytest.mark.unit
def test_panel_text_is_retried_until_populated(store, transcript_page, instant_delays):
    page = transcript_page(transcript_texts=["", "  ", "Late text"])

    outcome = _process(store, page, make_lecture(1, "A", 1), instant_delays)

    assert outcome is LectureOutcome.SAVED
    assert page.text_reads == 3
    assert _read(store, "1.1 A.txt").endswith("Late text")


@pytest.mark.unit
def test_empty_panel_writes_nothing(store, transcript_page, instant_delays):
    page = transcript_page(transcript_texts=[""])

    outcome = _process(store, page, make_lecture(1, "A", 1), instant_delays)

    assert outcome is LectureOutcome.EMPTY
    assert page.text_reads == instant_delays.text_attempts
    assert not store.exists("1.1 A.txt")


@pytest.mark.unit
def test_captions_saved_per_locale_and_failures_isolated(store, transcript_page, instant_delays):
    captions = [
        CaptionTrack(url="https://cdn.example.com/en.vtt", locale_id="en_US"),
        CaptionTrack(url="https://cdn.example.com/broken.vtt", locale_id="fr_FR"),
        CaptionTrack(url="https://cdn.example.com/x.vtt", locale_id=None),
    ]
    page = transcript_page(
        captions={
            "https://cdn.example.com/en.vtt": VTT,
            "https://cdn.example.com/broken.vtt": RuntimeError("HTTP 403"),
            "https://cdn.example.com/x.vtt": VTT,
        }
    )

    outcome = _process(store, page, make_lecture(1, "A", 1, captions=captions), instant_delays, download_srt=True)

    assert outcome is LectureOutcome.SAVED
    assert _read(store, "1.1 A [en_US].srt") == "1\n00:00:01,000 --> 00:00:02,000\nHello\n"
    assert store.exists("1.1 A [unknown].srt")
    assert not store.exists("1.1 A [fr_FR].srt")


@pytest.mark.unit
def test_captions_ignored_unless_requested(store, transcript_page, instant_delays):
    captions = [CaptionTrack(url="https://cdn.example.com/en.vtt", locale_id="en_US")]
    page = transcript_page(captions={"https://cdn.example.com/en.vtt": VTT})

    _process(store, page, make_lecture(1, "A", 1, captions=captions), instant_delays)

    assert page.fetched == []


@pytest.mark.unit
def test_navigation_failure_is_contained(store, transcript_page, instant_delays):
    def boom(url, wait_until):
        raise RuntimeError("net::ERR_CONNECTION_RESET")

    outcome = _process(store, transcript_page(goto_hook=boom), make_lecture(1, "A", 1), instant_delays)

    assert outcome is LectureOutcome.FAILED
    assert not store.exists("1.1 A.txt")


@pytest.mark.unit
def test_lecture_url_appends_player_path():
    assert lecture_url("https://www.udemy.com/course/x/", make_lecture(5, "A", 1)) == (
        "https://www.udemy.com/course/x/learn/lecture/5"
    )
