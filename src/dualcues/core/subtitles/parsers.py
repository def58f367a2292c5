"""
Parsing SRT / VTT / TTML vers des Cue (temps en secondes).
Le texte des cues est normalisé (balises retirées, blancs réduits) ; le texte brut
reste disponible dans meta["text_raw"].
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

from dualcues.core.models import Cue
from dualcues.core.utils.text import strip_markup

logger = logging.getLogger(__name__)

# SRT: HH:MM:SS,MMM --> HH:MM:SS,MMM
SRT_TIMECODE = re.compile(
    r"(\d{2}):(\d{2}):(\d{2})[,](\d{3})\s*-->\s*(\d{2}):(\d{2}):(\d{2})[,](\d{3})"
)
# VTT: HH:MM:SS.MMM --> HH:MM:SS.MMM (ou MM:SS.MMM)
VTT_TIMECODE = re.compile(
    r"(\d{2}):(\d{2}):(\d{2})[.](\d{3})\s*-->\s*(\d{2}):(\d{2}):(\d{2})[.](\d{3})"
)
VTT_TIMECODE_SHORT = re.compile(
    r"(\d{2}):(\d{2})[.](\d{3})\s*-->\s*(\d{2}):(\d{2})[.](\d{3})"
)
# TTML : horloge HH:MM:SS(.fff), décalages "12.5s" / "1500ms" / "915080832t"
TTML_CLOCK = re.compile(r"^(\d+):(\d{2}):(\d{2}(?:\.\d+)?)$")
TTML_OFFSET = re.compile(r"^(\d+(?:\.\d+)?)(h|m|s|ms|t)?$")

DEFAULT_TICK_RATE = 10_000_000
"""Netflix : 1 seconde = 10 000 000 ticks si ttp:tickRate est absent."""


class SubtitleParseError(Exception):
    """Contenu de sous-titres illisible (XML TTML invalide)."""


def _timecode_to_seconds(h: int, m: int, s: int, ms: int) -> float:
    return ((h * 60 + m) * 60 + s) + ms / 1000.0


def _make_cue(n: int, start: float, end: float, text_raw: str, lang: str, meta: dict[str, Any]) -> Cue:
    cue_meta = dict(meta)
    cue_meta["text_raw"] = text_raw
    return Cue(
        start_time=start,
        end_time=end,
        text=strip_markup(text_raw),
        cue_id=f"{lang}:{n}" if lang else str(n),
        meta=cue_meta,
    )


def parse_srt(content: str, source_path: str = "", lang: str = "") -> list[Cue]:
    """Parse le contenu SRT. Retourne une liste de Cue dans l'ordre du fichier."""
    cues: list[Cue] = []
    meta: dict[str, Any] = {}
    if source_path:
        meta["source_path"] = source_path
    lines = content.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    i = 0
    n = 0
    while i < len(lines):
        line = lines[i].strip()
        if not line:
            i += 1
            continue
        m = SRT_TIMECODE.match(line)
        if not m:
            i += 1
            continue
        g = [int(x) for x in m.groups()]
        start = _timecode_to_seconds(*g[:4])
        end = _timecode_to_seconds(*g[4:])
        i += 1
        text_lines: list[str] = []
        while i < len(lines):
            stripped = lines[i].strip()
            if not stripped:
                i += 1
                break
            if SRT_TIMECODE.match(stripped) or stripped.isdigit():
                break
            text_lines.append(stripped)
            i += 1
        cues.append(_make_cue(n, start, end, "\n".join(text_lines), lang, meta))
        n += 1
    return cues


def parse_vtt(content: str, source_path: str = "", lang: str = "") -> list[Cue]:
    """Parse le contenu VTT (WEBVTT). Ignore NOTE/STYLE/REGION. Retourne une liste de Cue."""
    cues: list[Cue] = []
    meta: dict[str, Any] = {}
    if source_path:
        meta["source_path"] = source_path
    text = content.replace("\r\n", "\n").replace("\r", "\n")
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.split("\n")
    i = 0
    while i < len(lines) and not lines[i].strip().upper().startswith("WEBVTT"):
        i += 1
    if i < len(lines):
        i += 1
    n = 0
    while i < len(lines):
        line = lines[i].strip()
        if not line:
            i += 1
            continue
        if line.upper().startswith(("NOTE", "STYLE", "REGION")):
            i += 1
            while i < len(lines) and lines[i].strip():
                i += 1
            continue
        m = VTT_TIMECODE.match(line)
        if m:
            g = [int(x) for x in m.groups()]
            start = _timecode_to_seconds(*g[:4])
            end = _timecode_to_seconds(*g[4:])
        else:
            m = VTT_TIMECODE_SHORT.match(line)
            if not m:
                i += 1
                continue
            g = [int(x) for x in m.groups()]
            start = _timecode_to_seconds(0, *g[:3])
            end = _timecode_to_seconds(0, *g[3:])
        i += 1
        text_lines = []
        while i < len(lines) and lines[i].strip():
            text_lines.append(lines[i].strip())
            i += 1
        cues.append(_make_cue(n, start, end, "\n".join(text_lines), lang, meta))
        n += 1
    return cues


def _local_name(tag: str) -> str:
    """'{namespace}p' -> 'p'."""
    return tag.rsplit("}", 1)[-1]


def _attr(element: ET.Element, name: str) -> str | None:
    """Attribut par nom local, quel que soit son namespace (ttp:, tts:, xml:...)."""
    for key, value in element.attrib.items():
        if _local_name(key) == name:
            return value
    return None


def parse_ttml_time(value: str | None, tick_rate: int = DEFAULT_TICK_RATE) -> float | None:
    """Convertit une expression de temps TTML en secondes ; None si illisible."""
    if not value:
        return None
    raw = value.strip()
    m = TTML_CLOCK.match(raw)
    if m:
        return int(m.group(1)) * 3600 + int(m.group(2)) * 60 + float(m.group(3))
    m = TTML_OFFSET.match(raw)
    if not m:
        return None
    number = float(m.group(1))
    unit = m.group(2) or "s"
    if unit == "t":
        return number / tick_rate
    return number * {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}[unit]


def _ttml_text(element: ET.Element) -> str:
    """Texte d'un paragraphe : <br/> -> saut de ligne, <span> parcourus récursivement."""
    parts: list[str] = [element.text or ""]
    for child in element:
        name = _local_name(child.tag)
        if name == "br":
            parts.append("\n")
        elif name == "span":
            parts.append(_ttml_text(child))
        parts.append(child.tail or "")
    return "".join(parts)


def _parse_ttml_root(content: str) -> ET.Element:
    try:
        return ET.fromstring(content.lstrip("\ufeff").strip())
    except ET.ParseError as exc:
        raise SubtitleParseError(f"TTML invalide : {exc}") from exc


def parse_ttml(content: str, source_path: str = "", lang: str = "") -> list[Cue]:
    """
    Parse un document TTML (format des plateformes de streaming).
    Les paragraphes sans begin/end exploitables sont ignorés ; sortie triée par début.
    Lève SubtitleParseError si le XML est invalide.
    """
    if not content or not content.strip():
        return []
    root = _parse_ttml_root(content)
    tick_rate = DEFAULT_TICK_RATE
    tick_attr = _attr(root, "tickRate")
    if tick_attr and tick_attr.strip().isdigit() and int(tick_attr) > 0:
        tick_rate = int(tick_attr)
    meta: dict[str, Any] = {}
    if source_path:
        meta["source_path"] = source_path
    cues: list[Cue] = []
    n = 0
    for p in root.iter():
        if _local_name(p.tag) != "p":
            continue
        start = parse_ttml_time(p.get("begin"), tick_rate)
        end = parse_ttml_time(p.get("end"), tick_rate)
        if start is None or end is None:
            logger.warning("Paragraphe TTML ignoré (temps illisible) : %s", _attr(p, "id") or "?")
            continue
        cue_meta = dict(meta)
        region = p.get("region")
        if region:
            cue_meta["region"] = region
        ttml_id = _attr(p, "id")
        if ttml_id:
            cue_meta["ttml_id"] = ttml_id
        cues.append(_make_cue(n, start, end, _ttml_text(p).strip(), lang, cue_meta))
        n += 1
    return sorted(cues, key=lambda c: c.start_time)


def _percentage_pair(value: str) -> dict[str, float]:
    """'10.000% 50.000%' -> {'x': 0.1, 'y': 0.5} ; (0, 0) si format inattendu."""
    parts = value.split()
    if len(parts) != 2:
        return {"x": 0.0, "y": 0.0}
    coords: list[float] = []
    for part in parts:
        try:
            coords.append(float(part.rstrip("%")) / 100.0)
        except ValueError:
            coords.append(0.0)
    return {"x": coords[0], "y": coords[1]}


def parse_ttml_regions(content: str) -> dict[str, dict[str, Any]]:
    """Régions déclarées dans <layout> : {id: {origin, extent, display_align}}."""
    if not content or not content.strip():
        return {}
    root = _parse_ttml_root(content)
    regions: dict[str, dict[str, Any]] = {}
    for layout in root.iter():
        if _local_name(layout.tag) != "layout":
            continue
        for region in layout:
            if _local_name(region.tag) != "region":
                continue
            region_id = _attr(region, "id")
            if not region_id:
                continue
            config: dict[str, Any] = {"id": region_id}
            origin = _attr(region, "origin")
            if origin:
                config["origin"] = _percentage_pair(origin)
            extent = _attr(region, "extent")
            if extent:
                config["extent"] = _percentage_pair(extent)
            display_align = _attr(region, "displayAlign")
            if display_align:
                config["display_align"] = display_align
            regions[region_id] = config
    return regions


def _looks_like_ttml(content: str) -> bool:
    head = content.lstrip("\ufeff").lstrip()[:500]
    return head.startswith("<?xml") or "<tt" in head


def parse_subtitle_content(content: str, source_path: str = "", lang: str = "") -> tuple[list[Cue], str]:
    """
    Parse le contenu déjà lu (SRT, VTT ou TTML) en détectant le format par l'en-tête.
    Retourne (cues, "srt"|"vtt"|"ttml").
    """
    if "WEBVTT" in content[:20]:
        return parse_vtt(content, source_path, lang), "vtt"
    if _looks_like_ttml(content):
        return parse_ttml(content, source_path, lang), "ttml"
    return parse_srt(content, source_path, lang), "srt"


# Encodages à essayer à l'import (fichiers Windows / utilisateur)
_SUBTITLE_ENCODINGS = ("utf-8", "cp1252", "latin-1")


def read_subtitle_file_content(path: Path) -> str:
    """
    Lit le contenu d'un fichier de sous-titres en essayant utf-8, puis cp1252, puis latin-1.
    """
    for enc in _SUBTITLE_ENCODINGS:
        try:
            return path.read_text(encoding=enc)
        except (UnicodeDecodeError, LookupError):
            continue
    return path.read_text(encoding="utf-8", errors="replace")


_FORMAT_BY_SUFFIX = {
    ".srt": ("srt", parse_srt),
    ".vtt": ("vtt", parse_vtt),
    ".ttml": ("ttml", parse_ttml),
    ".dfxp": ("ttml", parse_ttml),
}


def parse_subtitle_file(path: Path, lang: str = "") -> tuple[list[Cue], str]:
    """
    Détecte le format (extension, sinon en-tête) et parse. Retourne (cues, format).
    """
    path = Path(path)
    content = read_subtitle_file_content(path)
    known = _FORMAT_BY_SUFFIX.get(path.suffix.lower())
    if known:
        fmt, parser = known
        return parser(content, str(path), lang), fmt
    return parse_subtitle_content(content, str(path), lang)
