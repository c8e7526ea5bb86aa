"""Transcript scraping, tab fan-out, and subtitle conversion."""

from .harvester import TranscriptHarvester, partition_round_robin
from .subtitle_converter import convert_vtt_to_srt, normalize_timestamp
from .transcript_downloader import LectureTranscriptDownloader, SettleDelays

__all__ = [
    "TranscriptHarvester",
    "partition_round_robin",
    "LectureTranscriptDownloader",
    "SettleDelays",
    "convert_vtt_to_srt",
    "normalize_timestamp",
]
