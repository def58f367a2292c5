"""
Façade d'alignement : normalisation des cues en entrée, choix de la stratégie,
post-traitement et statistiques.

`align_subtitles` est une fonction pure (configuration passée à l'appel, statistiques
retournées). `AlignmentEngine` conserve une configuration et les statistiques du
dernier run pour les appelants qui partagent une instance (accès protégé par un verrou).
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import replace
from typing import Any, Iterable, Mapping

from dualcues.core.align.postprocess import compute_stats, post_process
from dualcues.core.align.strategies import get_strategy
from dualcues.core.models import (
    AlignedPair,
    AlignmentConfig,
    AlignmentResult,
    AlignmentStats,
    AlignmentStrategy,
    Cue,
)

logger = logging.getLogger(__name__)

CueInput = Cue | Mapping[str, Any]


def _coerce_time(value: Any, *, field_name: str, index: int) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Cue #%d : %s non numérique (%r), ramené à 0", index, field_name, value)
        return 0.0
    if not math.isfinite(number):
        logger.warning("Cue #%d : %s non fini (%r), ramené à 0", index, field_name, value)
        return 0.0
    if number < 0:
        logger.warning("Cue #%d : %s négatif (%s), ramené à 0", index, field_name, number)
        return 0.0
    return number


def normalize_cue(cue: CueInput, index: int = 0) -> Cue:
    """
    Valide une cue à la frontière du moteur. Les temps invalides sont bornés
    (non numérique / non fini / négatif -> 0 ; fin < début -> fin = début), le texte
    absent devient "". Chaque correction est journalisée, aucune exception n'est levée.
    """
    if not isinstance(cue, Cue):
        cue = Cue.from_mapping(cue)
    start = _coerce_time(cue.start_time, field_name="start_time", index=index)
    end = _coerce_time(cue.end_time, field_name="end_time", index=index)
    if end < start:
        logger.warning("Cue #%d : fin (%s) avant début (%s), durée ramenée à 0", index, end, start)
        end = start
    text = cue.text
    if not isinstance(text, str):
        text = "" if text is None else str(text)
    if (start, end, text) == (cue.start_time, cue.end_time, cue.text):
        return cue
    return replace(cue, start_time=start, end_time=end, text=text)


def normalize_cues(cues: Iterable[CueInput] | None) -> list[Cue]:
    return [normalize_cue(c, i) for i, c in enumerate(cues or [])]


def align_subtitles(
    primary: Iterable[CueInput] | None,
    secondary: Iterable[CueInput] | None,
    strategy: AlignmentStrategy | str | None = AlignmentStrategy.HYBRID,
    config: AlignmentConfig | None = None,
) -> AlignmentResult:
    """
    Aligne deux pistes et retourne les paires triées par début + statistiques.
    Une piste vide (données partielles ou tardives) donne un résultat vide, sans erreur.
    """
    config = config or AlignmentConfig()
    chosen = AlignmentStrategy.parse(strategy)
    primary_cues = normalize_cues(primary)
    secondary_cues = normalize_cues(secondary)
    if not primary_cues or not secondary_cues:
        logger.debug(
            "Alignement ignoré : piste vide (primaire=%d, secondaire=%d)",
            len(primary_cues),
            len(secondary_cues),
        )
        return AlignmentResult(pairs=[], stats=AlignmentStats(), strategy=chosen)

    logger.debug(
        "Alignement %s : %d cues primaires, %d cues secondaires",
        chosen.value,
        len(primary_cues),
        len(secondary_cues),
    )
    raw_pairs = get_strategy(chosen).align(primary_cues, secondary_cues, config)
    pairs = post_process(raw_pairs)
    stats = compute_stats(pairs)
    logger.debug(
        "Alignement terminé : %d paires, %d appariées, score moyen %.3f",
        stats.total_pairs,
        stats.successful_alignments,
        stats.average_score,
    )
    return AlignmentResult(pairs=pairs, stats=stats, strategy=chosen)


class AlignmentEngine:
    """Moteur avec configuration et statistiques du dernier run (une instance par session)."""

    def __init__(self, config: AlignmentConfig | None = None) -> None:
        self._config = (config or AlignmentConfig()).validate()
        self._stats = AlignmentStats()
        self._lock = threading.Lock()

    def align_subtitles(
        self,
        primary: Iterable[CueInput] | None,
        secondary: Iterable[CueInput] | None,
        strategy: AlignmentStrategy | str | None = AlignmentStrategy.HYBRID,
    ) -> list[AlignedPair]:
        with self._lock:
            result = align_subtitles(primary, secondary, strategy, self._config)
            self._stats = result.stats
            return list(result.pairs)

    def set_config(self, partial: Mapping[str, Any] | None = None, **kwargs: Any) -> AlignmentConfig:
        """Mise à jour partielle (clés camelCase ou snake_case) ; retourne la nouvelle config."""
        with self._lock:
            self._config = self._config.updated(partial, **kwargs)
            logger.debug("Configuration d'alignement mise à jour : %s", self._config.to_dict())
            return self._config

    def get_config(self) -> AlignmentConfig:
        with self._lock:
            return self._config

    def get_stats(self) -> AlignmentStats:
        """Statistiques du dernier run (instantané immuable, jamais l'objet interne mutable)."""
        with self._lock:
            return replace(self._stats)

    def reset_stats(self) -> None:
        with self._lock:
            self._stats = AlignmentStats()
