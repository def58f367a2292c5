"""
Stratégies d'alignement cues primaires ↔ cues secondaires.

Toutes partagent la même forme : glouton avec exclusion (une cue secondaire appariée
sort du pool), meilleur candidat = premier maximum rencontré par indice secondaire
croissant, cues secondaires restantes ajoutées dans leur ordre d'origine.
Chaque cue d'entrée apparaît donc exactement une fois dans la sortie.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Sequence

from dualcues.core.align.similarity import (
    content_similarity,
    keyword_similarity,
    structural_similarity,
)
from dualcues.core.models import (
    AlignedPair,
    AlignmentConfig,
    AlignmentMethod,
    AlignmentStrategy,
    Cue,
)

# (index primaire, cue primaire, index secondaire, cue secondaire) -> score
ScoreFn = Callable[[int, Cue, int, Cue], float]

HYBRID_WEIGHTS = (0.4, 0.5, 0.1)  # temps, contenu, position
ENHANCED_WEIGHTS = (0.4, 0.4, 0.2)  # contenu, mots-clés, structure


def time_overlap(a: Cue, b: Cue) -> float:
    """Recouvrement temporel (secondes, >= 0)."""
    return max(0.0, min(a.end_time, b.end_time) - max(a.start_time, b.start_time))


def time_alignment_score(a: Cue, b: Cue) -> float:
    """Recouvrement / durée moyenne, borné à [0, 1] ; 0 si la durée moyenne est nulle."""
    avg_duration = (a.duration + b.duration) / 2
    if avg_duration <= 0:
        return 0.0
    return min(1.0, max(0.0, time_overlap(a, b) / avg_duration))


def position_score(i: int, j: int, total_primary: int, total_secondary: int) -> float:
    """Proximité des positions relatives dans les deux séquences."""
    return 1.0 - abs(i / total_primary - j / total_secondary)


def greedy_align(
    primary: Sequence[Cue],
    secondary: Sequence[Cue],
    score_fn: ScoreFn,
    threshold: float,
    method: AlignmentMethod,
) -> list[AlignedPair]:
    """
    Pour chaque cue primaire (ordre d'entrée), retient la cue secondaire libre de
    meilleur score si ce score atteint `threshold`, sinon émet une paire primaire seule.
    """
    pairs: list[AlignedPair] = []
    used_secondary: set[int] = set()
    for i, p_cue in enumerate(primary):
        best_idx = -1
        best_score = 0.0
        for j, s_cue in enumerate(secondary):
            if j in used_secondary:
                continue
            score = score_fn(i, p_cue, j, s_cue)
            if score < threshold:
                continue
            if best_idx < 0 or score > best_score:
                best_idx = j
                best_score = score
        if best_idx >= 0:
            used_secondary.add(best_idx)
            pairs.append(
                AlignedPair.build(
                    p_cue,
                    secondary[best_idx],
                    best_score,
                    method,
                    primary_index=i,
                    secondary_index=best_idx,
                )
            )
        else:
            pairs.append(AlignedPair.build(p_cue, None, 0.0, method, primary_index=i))
    for j, s_cue in enumerate(secondary):
        if j not in used_secondary:
            pairs.append(AlignedPair.build(None, s_cue, 0.0, method, secondary_index=j))
    return pairs


class AlignmentStrategyImpl(ABC):
    """Une variante d'alignement : align(primary, secondary, config) -> paires."""

    method: AlignmentMethod

    @abstractmethod
    def align(
        self,
        primary: Sequence[Cue],
        secondary: Sequence[Cue],
        config: AlignmentConfig,
    ) -> list[AlignedPair]:
        raise NotImplementedError


class TimeAlignment(AlignmentStrategyImpl):
    """Recouvrement temporel seul."""

    method = AlignmentMethod.TIME

    def align(self, primary, secondary, config):
        return greedy_align(
            primary,
            secondary,
            lambda _i, p, _j, s: time_alignment_score(p, s),
            config.min_alignment_score,
            self.method,
        )


class ContentAlignment(AlignmentStrategyImpl):
    """Similarité textuelle seule (aucun signal temporel)."""

    method = AlignmentMethod.CONTENT

    def align(self, primary, secondary, config):
        return greedy_align(
            primary,
            secondary,
            lambda _i, p, _j, s: content_similarity(p.text, s.text),
            config.content_threshold,
            self.method,
        )


def enhanced_content_score(text1: str, text2: str) -> float:
    w_content, w_keyword, w_struct = ENHANCED_WEIGHTS
    return (
        w_content * content_similarity(text1, text2)
        + w_keyword * keyword_similarity(text1, text2)
        + w_struct * structural_similarity(text1, text2)
    )


class EnhancedContentAlignment(AlignmentStrategyImpl):
    """
    Contenu + mots-clés + structure (ancien sélecteur "semantic").
    Heuristique lexicale : aucun plongement sémantique n'est utilisé.
    """

    method = AlignmentMethod.ENHANCED_CONTENT

    def align(self, primary, secondary, config):
        return greedy_align(
            primary,
            secondary,
            lambda _i, p, _j, s: enhanced_content_score(p.text, s.text),
            config.content_threshold,
            self.method,
        )


class HybridAlignment(AlignmentStrategyImpl):
    """Temps (0.4) + contenu (0.5) + position relative (0.1). Stratégie par défaut."""

    method = AlignmentMethod.HYBRID

    def align(self, primary, secondary, config):
        total_p, total_s = len(primary), len(secondary)
        w_time, w_content, w_pos = HYBRID_WEIGHTS

        def score(i: int, p: Cue, j: int, s: Cue) -> float:
            return (
                w_time * time_alignment_score(p, s)
                + w_content * content_similarity(p.text, s.text)
                + w_pos * position_score(i, j, total_p, total_s)
            )

        return greedy_align(primary, secondary, score, config.min_alignment_score, self.method)


_STRATEGIES: dict[AlignmentStrategy, AlignmentStrategyImpl] = {
    AlignmentStrategy.TIME: TimeAlignment(),
    AlignmentStrategy.CONTENT: ContentAlignment(),
    AlignmentStrategy.ENHANCED_CONTENT: EnhancedContentAlignment(),
    AlignmentStrategy.HYBRID: HybridAlignment(),
}


def get_strategy(strategy: AlignmentStrategy | str | None) -> AlignmentStrategyImpl:
    """Variante correspondant au sélecteur (repli sur hybrid si inconnu)."""
    return _STRATEGIES[AlignmentStrategy.parse(strategy)]
