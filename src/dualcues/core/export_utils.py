"""Export des paires alignées (CSV, TSV, JSONL, HTML, Word, SRT bilingue)."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Sequence

from docx import Document

from dualcues.core.models import AlignedPair

PAIR_EXPORT_COLUMNS = [
    "start_time",
    "end_time",
    "primary_text",
    "secondary_text",
    "alignment_score",
    "alignment_method",
    "has_primary",
    "has_secondary",
]


def _pair_cells(pair: AlignedPair) -> list[str]:
    return [
        f"{pair.start_time:.3f}",
        f"{pair.end_time:.3f}",
        pair.primary_text.replace("\n", " "),
        pair.secondary_text.replace("\n", " "),
        f"{pair.alignment_score:.4f}",
        pair.alignment_method.value,
        "1" if pair.has_primary else "0",
        "1" if pair.has_secondary else "0",
    ]


def export_pairs_csv(pairs: Sequence[AlignedPair], path: Path) -> None:
    """Exporte les paires en CSV (une ligne par paire)."""
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.writer(f)
        w.writerow(PAIR_EXPORT_COLUMNS)
        for pair in pairs:
            w.writerow(_pair_cells(pair))
    return None


def export_pairs_tsv(pairs: Sequence[AlignedPair], path: Path) -> None:
    """Exporte les paires en TSV : mêmes colonnes que CSV."""
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.writer(f, delimiter="\t")
        w.writerow(PAIR_EXPORT_COLUMNS)
        for pair in pairs:
            w.writerow(_pair_cells(pair))
    return None


def export_pairs_jsonl(pairs: Sequence[AlignedPair], path: Path) -> None:
    """Exporte les paires en JSONL (forme camelCase de AlignedPair.to_dict)."""
    with path.open("w", encoding="utf-8") as f:
        for pair in pairs:
            f.write(json.dumps(pair.to_dict(), ensure_ascii=False) + "\n")
    return None


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def export_pairs_html(pairs: Sequence[AlignedPair], path: Path, title: str | None = None) -> None:
    """Exporte les paires en tableau HTML (début | fin | primaire | secondaire | score)."""
    t = title or "Sous-titres alignés"
    lines = [
        "<!DOCTYPE html>",
        "<html><head><meta charset='utf-8'><title>" + _escape(t) + "</title>",
        "<style>table { border-collapse: collapse; } th, td { border: 1px solid #ccc; padding: 6px; text-align: left; }</style>",
        "</head><body>",
        "<h1>" + _escape(t) + "</h1>",
        "<table><thead><tr>",
    ]
    for col in PAIR_EXPORT_COLUMNS[:5]:
        lines.append("<th>" + _escape(col) + "</th>")
    lines.append("</tr></thead><tbody>")
    for pair in pairs:
        lines.append("<tr>")
        for cell in _pair_cells(pair)[:5]:
            lines.append("<td>" + _escape(cell) + "</td>")
        lines.append("</tr>")
    lines.append("</tbody></table></body></html>")
    path.write_text("\n".join(lines), encoding="utf-8")
    return None


def export_pairs_docx(pairs: Sequence[AlignedPair], path: Path) -> None:
    """Exporte les paires en Word (.docx) : tableau début, fin, primaire, secondaire, score."""
    doc = Document()
    doc.add_heading("Sous-titres alignés", 0)
    if not pairs:
        doc.add_paragraph("Aucune paire.")
        doc.save(str(path))
        return None
    columns = PAIR_EXPORT_COLUMNS[:5]
    table = doc.add_table(rows=1 + len(pairs), cols=len(columns))
    table.style = "Table Grid"
    for j, col in enumerate(columns):
        table.rows[0].cells[j].text = col
    for i, pair in enumerate(pairs):
        for j, cell in enumerate(_pair_cells(pair)[: len(columns)]):
            table.rows[i + 1].cells[j].text = cell
    doc.save(str(path))
    return None


def _seconds_to_srt_time(seconds: float) -> str:
    """Convertit des secondes en timecode SRT HH:MM:SS,mmm."""
    ms = max(0, int(round(seconds * 1000)))
    s, ms_rem = divmod(ms, 1000)
    m, s_rem = divmod(s, 60)
    h, m_rem = divmod(m, 60)
    return f"{h:02d}:{m_rem:02d}:{s_rem:02d},{ms_rem:03d}"


def pairs_to_bilingual_srt(pairs: Sequence[AlignedPair]) -> str:
    """SRT bilingue : ligne primaire puis ligne secondaire dans chaque bloc."""
    blocks: list[str] = []
    for idx, pair in enumerate(pairs, start=1):
        text = "\n".join(t for t in (pair.primary_text.strip(), pair.secondary_text.strip()) if t)
        blocks.append(
            f"{idx}\n{_seconds_to_srt_time(pair.start_time)} --> {_seconds_to_srt_time(pair.end_time)}\n{text}"
        )
    return "\n\n".join(blocks) + "\n" if blocks else ""


def export_pairs_srt(pairs: Sequence[AlignedPair], path: Path) -> None:
    path.write_text(pairs_to_bilingual_srt(pairs), encoding="utf-8")
    return None


_EXPORTERS = {
    ".csv": export_pairs_csv,
    ".tsv": export_pairs_tsv,
    ".jsonl": export_pairs_jsonl,
    ".html": export_pairs_html,
    ".docx": export_pairs_docx,
    ".srt": export_pairs_srt,
}


def export_pairs(pairs: Sequence[AlignedPair], path: Path) -> None:
    """Exporte selon l'extension du fichier (CSV par défaut)."""
    path = Path(path)
    exporter = _EXPORTERS.get(path.suffix.lower(), export_pairs_csv)
    exporter(pairs, path)
