"""Post-traitement des paires alignées : tri, fusion des doublons adjacents, statistiques."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from dualcues.core.models import AlignedPair, AlignmentMethod, AlignmentStats

# Écart maximal (secondes) entre deux paires identiques pour les fusionner.
MERGE_MAX_GAP = 1.0


def sort_by_start_time(pairs: Sequence[AlignedPair]) -> list[AlignedPair]:
    """Tri stable par début croissant."""
    return sorted(pairs, key=lambda p: p.start_time)


def can_merge(current: AlignedPair, following: AlignedPair) -> bool:
    return (
        following.start_time - current.end_time <= MERGE_MAX_GAP
        and current.primary_text == following.primary_text
        and current.secondary_text == following.secondary_text
        and current.has_primary == following.has_primary
        and current.has_secondary == following.has_secondary
    )


def merge_pairs(current: AlignedPair, following: AlignedPair) -> AlignedPair:
    """Garde le début de la première paire, prend la fin de la seconde, score max."""
    return replace(
        current,
        end_time=following.end_time,
        alignment_score=max(current.alignment_score, following.alignment_score),
        primary_indices=current.primary_indices + following.primary_indices,
        secondary_indices=current.secondary_indices + following.secondary_indices,
    )


def merge_adjacent(pairs: Sequence[AlignedPair]) -> list[AlignedPair]:
    """
    Fusionne les paires consécutives de même texte et de même composition (primaire
    seule, secondaire seule ou appariée) séparées d'au plus MERGE_MAX_GAP : une même
    réplique re-segmentée par une des pistes.
    """
    merged: list[AlignedPair] = []
    current: AlignedPair | None = None
    for pair in pairs:
        if current is None:
            current = pair
        elif can_merge(current, pair):
            current = merge_pairs(current, pair)
        else:
            merged.append(current)
            current = pair
    if current is not None:
        merged.append(current)
    return merged


def post_process(pairs: Sequence[AlignedPair]) -> list[AlignedPair]:
    return merge_adjacent(sort_by_start_time(pairs))


def compute_stats(pairs: Sequence[AlignedPair]) -> AlignmentStats:
    """Statistiques finales ; average_score vaut 0 pour une liste vide."""
    aligned = [p for p in pairs if p.is_aligned]
    by_method = {method: 0 for method in AlignmentMethod}
    for pair in aligned:
        by_method[pair.alignment_method] += 1
    total = len(pairs)
    return AlignmentStats(
        total_pairs=total,
        successful_alignments=len(aligned),
        time_based_alignments=by_method[AlignmentMethod.TIME],
        content_based_alignments=by_method[AlignmentMethod.CONTENT] + by_method[AlignmentMethod.ENHANCED_CONTENT],
        hybrid_alignments=by_method[AlignmentMethod.HYBRID],
        average_score=sum(p.alignment_score for p in pairs) / total if total else 0.0,
    )
