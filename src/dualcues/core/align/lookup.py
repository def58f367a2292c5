"""Recherche de la paire affichée à un instant donné (pour la couche d'affichage)."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from dualcues.core.models import AlignedPair, AlignmentConfig

logger = logging.getLogger(__name__)

DEFAULT_INDEX_INTERVAL = 10.0
"""Largeur (secondes) d'une case de l'index temporel."""
MAX_MEDIA_TIME = 86400.0
"""Au-delà de 24 h, un temps est considéré aberrant et n'est pas indexé."""

DEFAULT_TOLERANCE = AlignmentConfig().time_tolerance

TimeIndex = dict[int, list[AlignedPair]]


def _covers(pair: AlignedPair, t: float, tolerance: float) -> bool:
    return pair.start_time - tolerance <= t <= pair.end_time + tolerance


def find_pair_at_time(
    pairs: Sequence[AlignedPair],
    t: float,
    tolerance: float = DEFAULT_TOLERANCE,
) -> AlignedPair | None:
    """Première paire (dans l'ordre de la liste) couvrant t ± tolerance."""
    for pair in pairs:
        if _covers(pair, t, tolerance):
            return pair
    return None


def build_time_index(
    pairs: Sequence[AlignedPair],
    interval: float = DEFAULT_INDEX_INTERVAL,
) -> TimeIndex:
    """
    Index par cases de `interval` secondes : chaque paire est rangée dans toutes les
    cases qu'elle recouvre. Les paires aux temps aberrants (< 0 ou > 24 h) sont ignorées.
    """
    if interval <= 0:
        raise ValueError(f"interval doit être > 0 (reçu {interval}).")
    index: TimeIndex = {}
    for pair in pairs:
        if not (0 <= pair.start_time <= MAX_MEDIA_TIME and 0 <= pair.end_time <= MAX_MEDIA_TIME):
            logger.debug("Paire ignorée (temps aberrant) : %s -> %s", pair.start_time, pair.end_time)
            continue
        first = math.floor(pair.start_time / interval)
        last = math.floor(pair.end_time / interval)
        for bucket in range(first, last + 1):
            index.setdefault(bucket, []).append(pair)
    logger.debug("Index temporel : %d cases de %s s", len(index), interval)
    return index


def find_pair_by_time_index(
    index: TimeIndex,
    t: float,
    tolerance: float = DEFAULT_TOLERANCE,
    interval: float = DEFAULT_INDEX_INTERVAL,
) -> AlignedPair | None:
    """
    Comme find_pair_at_time, limité aux cases recouvrant [t - tolerance, t + tolerance]
    (même `interval` qu'à la construction). Une paire rangée dans plusieurs cases
    n'est examinée qu'une fois, dans l'ordre des cases.
    """
    first = math.floor((t - tolerance) / interval)
    last = math.floor((t + tolerance) / interval)
    candidates: list[AlignedPair] = []
    seen: set[int] = set()
    for bucket in range(first, last + 1):
        for pair in index.get(bucket, []):
            if id(pair) not in seen:
                seen.add(id(pair))
                candidates.append(pair)
    return find_pair_at_time(candidates, t, tolerance)
