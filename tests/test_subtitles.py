"""Tests d'import des pistes : SRT, VTT, TTML (temps, texte nettoyé, régions, encodages)."""

import pytest

from dualcues.core.subtitles import (
    SubtitleParseError,
    parse_srt,
    parse_subtitle_content,
    parse_subtitle_file,
    parse_ttml,
    parse_ttml_regions,
    parse_ttml_time,
    parse_vtt,
    read_subtitle_file_content,
)


def test_parse_srt_basic():
    content = """1
00:00:01,000 --> 00:00:03,500
Hello world.
2
00:00:04,000 --> 00:00:06,000
How are you?
"""
    cues = parse_srt(content)
    assert len(cues) == 2
    assert cues[0].start_time == 1.0
    assert cues[0].end_time == 3.5
    assert cues[0].text == "Hello world."
    assert cues[0].cue_id == "0"
    assert cues[1].text == "How are you?"


def test_parse_srt_multi_line_and_markup():
    content = "1\r\n00:00:01,000 --> 00:00:03,500\r\n<i>Line one.</i>\r\nLine two.\r\n"
    cues = parse_srt(content, lang="en")
    assert len(cues) == 1
    assert cues[0].text == "Line one. Line two."
    assert cues[0].meta["text_raw"] == "<i>Line one.</i>\nLine two."
    assert cues[0].cue_id == "en:0"


def test_parse_vtt_basic_and_short_timecodes():
    content = """WEBVTT

NOTE commentaire
sur deux lignes

00:01.000 --> 00:02.500
<v Ted>Hello world.</v>

01:00:00.000 --> 01:00:01.250
Bye.
"""
    cues = parse_vtt(content)
    assert [(c.start_time, c.end_time) for c in cues] == [(1.0, 2.5), (3600.0, 3601.25)]
    assert cues[0].text == "Hello world."


def test_parse_vtt_with_bom():
    cues = parse_vtt("\ufeffWEBVTT\n\n00:00:01.000 --> 00:00:02.000\nHi\n")
    assert len(cues) == 1
    assert cues[0].text == "Hi"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("00:00:01.500", 1.5),
        ("01:02:03", 3723.0),
        ("1500ms", 1.5),
        ("2.5s", 2.5),
        ("12", 12.0),
        ("1m", 60.0),
        ("1h", 3600.0),
        ("10000000t", 1.0),
    ],
)
def test_parse_ttml_time(value, expected):
    assert parse_ttml_time(value) == pytest.approx(expected)


def test_parse_ttml_time_custom_tick_rate_and_invalid():
    assert parse_ttml_time("500t", tick_rate=1000) == pytest.approx(0.5)
    assert parse_ttml_time("abc") is None
    assert parse_ttml_time(None) is None
    assert parse_ttml_time("") is None


def test_parse_ttml_fixture(fixtures_dir):
    content = (fixtures_dir / "episode_fr.ttml").read_text(encoding="utf-8")
    cues = parse_ttml(content, lang="fr")
    assert [c.text for c in cues] == ["Où vas-tu ?", "À la gare."]
    assert cues[0].start_time == pytest.approx(0.9)
    assert cues[0].end_time == pytest.approx(3.1)
    assert cues[1].start_time == pytest.approx(3.6)
    assert cues[1].meta["text_raw"] == "À la\ngare."
    assert cues[1].meta["region"] == "region0"
    assert cues[1].meta["ttml_id"] == "subtitle2"


def test_parse_ttml_skips_untimed_paragraph(fixtures_dir, caplog):
    content = (fixtures_dir / "episode_fr.ttml").read_text(encoding="utf-8")
    with caplog.at_level("WARNING", logger="dualcues.core.subtitles.parsers"):
        cues = parse_ttml(content)
    assert len(cues) == 2
    assert any("subtitle3" in r.getMessage() for r in caplog.records)


def test_parse_ttml_invalid_xml():
    with pytest.raises(SubtitleParseError):
        parse_ttml("<tt><body><p begin='1s'></tt>")
    assert parse_ttml("   ") == []


def test_parse_ttml_regions(fixtures_dir):
    content = (fixtures_dir / "episode_fr.ttml").read_text(encoding="utf-8")
    regions = parse_ttml_regions(content)
    assert set(regions) == {"region0", "region1"}
    bottom = regions["region0"]
    assert bottom["origin"] == pytest.approx({"x": 0.1, "y": 0.8})
    assert bottom["extent"] == pytest.approx({"x": 0.8, "y": 0.2})
    assert bottom["display_align"] == "after"
    assert regions["region1"]["display_align"] == "before"


def test_parse_subtitle_content_detects_format(fixtures_dir):
    for name, expected in [("episode_en.srt", "srt"), ("episode_fr.vtt", "vtt"), ("episode_fr.ttml", "ttml")]:
        content = (fixtures_dir / name).read_text(encoding="utf-8")
        cues, fmt = parse_subtitle_content(content)
        assert fmt == expected
        assert cues


def test_parse_subtitle_file(fixtures_dir):
    path = fixtures_dir / "episode_en.srt"
    cues, fmt = parse_subtitle_file(path, lang="en")
    assert fmt == "srt"
    assert len(cues) == 4
    assert cues[2].text == "Wait for me!"
    assert cues[3].cue_id == "en:3"
    assert cues[0].meta["source_path"] == str(path)


def test_parse_subtitle_file_vtt_fixture(fixtures_dir):
    cues, fmt = parse_subtitle_file(fixtures_dir / "episode_fr.vtt", lang="fr")
    assert fmt == "vtt"
    assert [c.text for c in cues] == ["Où vas-tu ?", "À la gare.", "Attends-moi !", "Quoi ?"]
    assert cues[0].start_time == pytest.approx(0.9)


def test_read_subtitle_file_content_cp1252_fallback(tmp_path):
    path = tmp_path / "legacy.srt"
    path.write_bytes("1\n00:00:01,000 --> 00:00:02,000\nDéjà vu €\n".encode("cp1252"))
    assert "Déjà vu €" in read_subtitle_file_content(path)
    cues, _ = parse_subtitle_file(path)
    assert cues[0].text == "Déjà vu €"
