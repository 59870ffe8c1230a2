"""Unit tests for the text, JSON, and WebVTT formatters.

WHY: The rendered document is the only thing users keep. A malformed
VTT timing line or a JSON shape drift breaks players and downstream
scripts.

HOW: Every formatter renders the same two-chunk transcript fixture from
conftest.py. JSON output is validated against the schema shipped in
the formatters package.

RULES:
- Schema validation uses longscribe/formatters/transcript_schema.json
- Cue numbering is checked across chunk boundaries
"""

import json
import re
from pathlib import Path

import jsonschema
import pytest

from longscribe.core.ir import ChunkResult, Transcript
from longscribe.formatters import FORMATTERS
from longscribe.formatters.json_output import JSONFormatter
from longscribe.formatters.plain_text import PlainTextFormatter
from longscribe.formatters.webvtt import WebVTTFormatter, format_vtt_time

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "longscribe" / "formatters" / "transcript_schema.json"


def _load_schema():
    with open(SCHEMA_PATH) as f:
        return json.load(f)


def _vtt_blocks(content):
    """Split a VTT document into (number, timing, text) tuples."""
    body = content.split("\n\n", 1)[1]
    blocks = []
    for block in body.strip("\n").split("\n\n"):
        if not block:
            continue
        number, timing, text = block.split("\n", 2)
        blocks.append((number, timing, text))
    return blocks


class TestRegistry:

    def test_three_formats_registered(self):
        assert set(FORMATTERS) == {"text", "json", "vtt"}

    @pytest.mark.parametrize("key,suffix", [("text", ".txt"), ("json", ".json"), ("vtt", ".vtt")])
    def test_suffixes(self, key, suffix, two_chunk_transcript):
        assert FORMATTERS[key]().format(two_chunk_transcript).suffix == suffix


class TestPlainTextFormatter:

    def test_chunks_joined_with_space(self, two_chunk_transcript):
        output = PlainTextFormatter().format(two_chunk_transcript)
        assert output.content == "Hello world. Next sentence. Goodbye now!\n"

    def test_blank_chunks_skipped(self):
        transcript = Transcript(
            chunks=[
                ChunkResult(0.0, 60.0, "one"),
                ChunkResult(60.0, 120.0, "   "),
                ChunkResult(120.0, 130.0, "two"),
            ],
            duration_s=130.0,
        )
        assert PlainTextFormatter().format(transcript).content == "one two\n"

    def test_empty_transcript_is_a_newline(self):
        assert PlainTextFormatter().format(Transcript(chunks=[], duration_s=5.0)).content == "\n"


class TestJSONFormatter:

    def test_schema_validation(self, two_chunk_transcript):
        data = json.loads(JSONFormatter().format(two_chunk_transcript).content)
        jsonschema.validate(instance=data, schema=_load_schema())

    def test_fields(self, two_chunk_transcript):
        data = json.loads(JSONFormatter().format(two_chunk_transcript).content)
        text = PlainTextFormatter().format(two_chunk_transcript).content.rstrip("\n")
        assert data["duration_seconds"] == 125.0
        assert data["chunks"] == 2
        assert data["text"] == text
        assert data["chunk_data"][1] == {
            "StartTime": 60.0,
            "EndTime": 120.0,
            "Text": "Goodbye now!",
            "Timestamps": [1.0, 1.5],
            "Tokens": ["Goodbye", " now!"],
        }

    def test_two_space_indent(self, two_chunk_transcript):
        content = JSONFormatter().format(two_chunk_transcript).content
        assert content.startswith('{\n  "duration_seconds": 125.0,')
        assert content.endswith("}\n")

    def test_chunk_data_omitted_when_empty(self):
        data = json.loads(JSONFormatter().format(Transcript(chunks=[], duration_s=3.0)).content)
        assert "chunk_data" not in data
        assert data["chunks"] == 0
        jsonschema.validate(instance=data, schema=_load_schema())

    def test_non_ascii_written_verbatim(self):
        transcript = Transcript(chunks=[ChunkResult(0.0, 5.0, "Grüße")], duration_s=5.0)
        assert "Grüße" in JSONFormatter().format(transcript).content


class TestWebVTTFormatter:

    def test_header(self, two_chunk_transcript):
        content = WebVTTFormatter().format(two_chunk_transcript).content
        assert content.startswith("WEBVTT\n\n")

    def test_cues_numbered_across_chunks(self, two_chunk_transcript):
        blocks = _vtt_blocks(WebVTTFormatter().format(two_chunk_transcript).content)
        assert [b[0] for b in blocks] == ["1", "2", "3"]
        assert [b[2] for b in blocks] == ["Hello world.", "Next sentence.", "Goodbye now!"]

    def test_absolute_timing(self, two_chunk_transcript):
        blocks = _vtt_blocks(WebVTTFormatter().format(two_chunk_transcript).content)
        assert blocks[0][1] == "00:00:00.000 --> 00:00:00.400"
        assert blocks[1][1] == "00:00:03.000 --> 00:00:03.500"
        assert blocks[2][1] == "00:01:01.000 --> 00:01:01.500"

    def test_timing_line_format(self, two_chunk_transcript):
        content = WebVTTFormatter().format(two_chunk_transcript).content
        pattern = re.compile(r"^\d{2}:\d{2}:\d{2}\.\d{3} --> \d{2}:\d{2}:\d{2}\.\d{3}$")
        timing_lines = [line for line in content.splitlines() if "-->" in line]
        assert len(timing_lines) == 3
        assert all(pattern.match(line) for line in timing_lines)

    def test_chunk_without_tokens_spans_whole_chunk(self):
        transcript = Transcript(
            chunks=[ChunkResult(120.0, 125.0, "tail end")], duration_s=125.0,
        )
        blocks = _vtt_blocks(WebVTTFormatter().format(transcript).content)
        assert blocks == [("1", "00:02:00.000 --> 00:02:05.000", "tail end")]

    def test_blank_chunk_consumes_no_number(self):
        transcript = Transcript(
            chunks=[
                ChunkResult(0.0, 60.0, "  "),
                ChunkResult(60.0, 120.0, "Only one.", timestamps=[0.5], tokens=["Only one."]),
            ],
            duration_s=120.0,
        )
        blocks = _vtt_blocks(WebVTTFormatter().format(transcript).content)
        assert [b[0] for b in blocks] == ["1"]

    def test_empty_transcript_is_header_only(self):
        content = WebVTTFormatter().format(Transcript(chunks=[], duration_s=1.0)).content
        assert content == "WEBVTT\n\n"


class TestFormatVTTTime:

    @pytest.mark.parametrize("seconds,expected", [
        (0.0, "00:00:00.000"),
        (0.4, "00:00:00.400"),
        (60.4, "00:01:00.400"),
        (3725.25, "01:02:05.250"),
        (59.9996, "00:01:00.000"),
        (-0.2, "00:00:00.000"),
    ])
    def test_formatting(self, seconds, expected):
        assert format_vtt_time(seconds) == expected
