"""Import de pistes de sous-titres SRT/VTT/TTML en Cue."""

from dualcues.core.subtitles.parsers import (
    SubtitleParseError,
    parse_srt,
    parse_vtt,
    parse_ttml,
    parse_ttml_time,
    parse_ttml_regions,
    parse_subtitle_content,
    parse_subtitle_file,
    read_subtitle_file_content,
)

__all__ = [
    "SubtitleParseError",
    "parse_srt",
    "parse_vtt",
    "parse_ttml",
    "parse_ttml_time",
    "parse_ttml_regions",
    "parse_subtitle_content",
    "parse_subtitle_file",
    "read_subtitle_file_content",
]
