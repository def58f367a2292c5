"""Tests des exports de paires alignées (CSV, TSV, JSONL, HTML, Word, SRT bilingue)."""

from __future__ import annotations

import csv
import json

import pytest
from docx import Document

from dualcues.core.export_utils import (
    PAIR_EXPORT_COLUMNS,
    export_pairs,
    export_pairs_csv,
    export_pairs_docx,
    export_pairs_html,
    export_pairs_jsonl,
    export_pairs_tsv,
    pairs_to_bilingual_srt,
)
from dualcues.core.models import AlignedPair, AlignmentMethod


@pytest.fixture
def pairs() -> list[AlignedPair]:
    return [
        AlignedPair(
            start_time=1.0,
            end_time=3.1,
            primary_text="Where are you going?",
            secondary_text="Où vas-tu ?",
            alignment_score=0.9,
            alignment_method=AlignmentMethod.HYBRID,
            has_primary=True,
            has_secondary=True,
        ),
        AlignedPair(
            start_time=20.0,
            end_time=22.0,
            primary_text="Thank <you> & bye",
            alignment_method=AlignmentMethod.HYBRID,
            has_primary=True,
        ),
    ]


def test_export_csv(tmp_path, pairs):
    path = tmp_path / "pairs.csv"
    export_pairs_csv(pairs, path)
    with path.open(encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == PAIR_EXPORT_COLUMNS
    assert rows[1] == ["1.000", "3.100", "Where are you going?", "Où vas-tu ?", "0.9000", "hybrid", "1", "1"]
    assert rows[2][3] == ""
    assert rows[2][7] == "0"


def test_export_tsv(tmp_path, pairs):
    path = tmp_path / "pairs.tsv"
    export_pairs_tsv(pairs, path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0].split("\t") == PAIR_EXPORT_COLUMNS
    assert len(lines) == 3


def test_export_jsonl(tmp_path, pairs):
    path = tmp_path / "pairs.jsonl"
    export_pairs_jsonl(pairs, path)
    records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert records[0]["secondaryText"] == "Où vas-tu ?"
    assert records[0]["alignmentMethod"] == "hybrid"
    assert records[1]["hasSecondary"] is False
    assert records[1]["duration"] == 2.0


def test_export_html_escapes(tmp_path, pairs):
    path = tmp_path / "pairs.html"
    export_pairs_html(pairs, path, title="Épisode 1")
    html = path.read_text(encoding="utf-8")
    assert "<title>Épisode 1</title>" in html
    assert "Thank &lt;you&gt; &amp; bye" in html
    assert html.count("<tr>") == 3


def test_export_docx(tmp_path, pairs):
    path = tmp_path / "pairs.docx"
    export_pairs_docx(pairs, path)
    table = Document(str(path)).tables[0]
    assert [c.text for c in table.rows[0].cells] == PAIR_EXPORT_COLUMNS[:5]
    assert table.rows[1].cells[3].text == "Où vas-tu ?"
    assert len(table.rows) == 3


def test_export_docx_empty(tmp_path):
    path = tmp_path / "empty.docx"
    export_pairs_docx([], path)
    doc = Document(str(path))
    assert not doc.tables
    assert any(p.text == "Aucune paire." for p in doc.paragraphs)


def test_bilingual_srt(pairs):
    assert pairs_to_bilingual_srt(pairs) == (
        "1\n00:00:01,000 --> 00:00:03,100\nWhere are you going?\nOù vas-tu ?\n\n"
        "2\n00:00:20,000 --> 00:00:22,000\nThank <you> & bye\n"
    )
    assert pairs_to_bilingual_srt([]) == ""


def test_export_pairs_dispatch_on_suffix(tmp_path, pairs):
    export_pairs(pairs, tmp_path / "out.SRT")
    assert (tmp_path / "out.SRT").read_text(encoding="utf-8").startswith("1\n00:00:01,000")
    export_pairs(pairs, tmp_path / "out.txt")
    assert (tmp_path / "out.txt").read_text(encoding="utf-8").startswith(",".join(PAIR_EXPORT_COLUMNS))
