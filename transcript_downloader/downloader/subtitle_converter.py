"""Converts WebVTT caption tracks into numbered SRT files."""

from __future__ import annotations

import re
from typing import List, Optional

HEADER_PATTERN = re.compile(r"^\ufeff?WEBVTT[^\n]*\n?")
BLOCK_SEPARATOR = re.compile(r"\n{2,}")
TIMING_ARROW = "-->"


def normalize_timestamp(value: str) -> str:
    """Turns ``MM:SS.f`` style VTT times into ``HH:MM:SS,mmm``."""

    main, _, fraction = value.strip().replace(",", ".").partition(".")
    parts = main.split(":")
    while len(parts) < 3:
        parts.insert(0, "00")
    millis = (fraction or "000").ljust(3, "0")[:3]
    return f"{':'.join(part.zfill(2) for part in parts)},{millis}"


def _convert_block(block: str, number: int) -> Optional[str]:
    lines = block.strip().split("\n")
    if len(lines) < 2:
        return None
    # Cue identifiers may precede the timing line.
    timing_at = next((i for i, line in enumerate(lines) if TIMING_ARROW in line), None)
    if timing_at is None or timing_at == len(lines) - 1:
        return None
    start, _, end = lines[timing_at].partition(TIMING_ARROW)
    end_parts = end.split()
    if not start.strip() or not end_parts:
        return None
    text = "\n".join(lines[timing_at + 1 :])
    return f"{number}\n{normalize_timestamp(start)} --> {normalize_timestamp(end_parts[0])}\n{text}\n"


def convert_vtt_to_srt(vtt: str) -> str:
    body = HEADER_PATTERN.sub("", vtt.replace("\r\n", "\n").replace("\r", "\n"), count=1).strip()
    if not body:
        return ""

    blocks: List[str] = []
    for raw_block in BLOCK_SEPARATOR.split(body):
        converted = _convert_block(raw_block, len(blocks) + 1)
        if converted is not None:
            blocks.append(converted)
    return "\n".join(blocks)
