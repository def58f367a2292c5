"""Modèle de données : cues, paires alignées, configuration et statistiques d'alignement."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, Mapping

logger = logging.getLogger(__name__)


class AlignmentConfigError(ValueError):
    """Configuration d'alignement invalide (seuil hors bornes, tolérance négative...)."""


@dataclass(frozen=True)
class Cue:
    """Une cue sous-titre d'une piste (temps en secondes)."""

    start_time: float
    end_time: float
    text: str = ""
    cue_id: str = ""
    meta: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Cue":
        """
        Construit une Cue depuis un dict (format extension `startTime`/`endTime`/`text`
        ou format interne `start_time`/`end_time`/`text_clean`).
        Les valeurs ne sont pas validées ici : voir normalize_cues().
        """
        start = data.get("startTime", data.get("start_time"))
        end = data.get("endTime", data.get("end_time"))
        text = data.get("text")
        if text is None:
            text = data.get("text_clean") or data.get("text_raw") or ""
        return cls(
            start_time=start,  # type: ignore[arg-type]
            end_time=end,  # type: ignore[arg-type]
            text=text,
            cue_id=str(data.get("cue_id") or data.get("id") or ""),
        )


class AlignmentMethod(str, Enum):
    """Méthode ayant produit une paire alignée."""

    TIME = "time"
    CONTENT = "content"
    ENHANCED_CONTENT = "enhanced-content"
    HYBRID = "hybrid"


class AlignmentStrategy(str, Enum):
    """Stratégie d'alignement demandée par l'appelant."""

    TIME = "time"
    CONTENT = "content"
    ENHANCED_CONTENT = "enhanced-content"
    HYBRID = "hybrid"

    @classmethod
    def parse(cls, value: "AlignmentStrategy | str | None") -> "AlignmentStrategy":
        """
        Résout un sélecteur de stratégie (valeur, nom d'enum, ou ancien alias "semantic").
        Un sélecteur inconnu retombe silencieusement sur HYBRID.
        """
        if isinstance(value, cls):
            return value
        candidate = (value or "").strip().lower().replace("_", "-")
        if candidate == "semantic":
            return cls.ENHANCED_CONTENT
        for member in cls:
            if candidate == member.value:
                return member
        logger.debug("Stratégie inconnue %r, repli sur hybrid", value)
        return cls.HYBRID


@dataclass(frozen=True)
class AlignedPair:
    """Unité bilingue : zéro ou une cue primaire + zéro ou une cue secondaire."""

    start_time: float
    end_time: float
    primary_text: str = ""
    secondary_text: str = ""
    alignment_score: float = 0.0
    alignment_method: AlignmentMethod = AlignmentMethod.HYBRID
    has_primary: bool = False
    has_secondary: bool = False
    primary_indices: tuple[int, ...] = ()
    """Positions (dans l'entrée primaire) des cues couvertes par cette paire."""
    secondary_indices: tuple[int, ...] = ()
    """Positions (dans l'entrée secondaire) des cues couvertes par cette paire."""

    def __post_init__(self) -> None:
        if not (self.has_primary or self.has_secondary):
            raise ValueError("Une paire alignée doit contenir au moins une cue.")

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def is_aligned(self) -> bool:
        """True si la paire réunit les deux langues."""
        return self.has_primary and self.has_secondary

    @classmethod
    def build(
        cls,
        primary: Cue | None,
        secondary: Cue | None,
        score: float,
        method: AlignmentMethod,
        *,
        primary_index: int | None = None,
        secondary_index: int | None = None,
    ) -> "AlignedPair":
        """Crée une paire ; début/fin = min/max des cues présentes."""
        present = [c for c in (primary, secondary) if c is not None]
        if not present:
            raise ValueError("Une paire alignée doit contenir au moins une cue.")
        return cls(
            start_time=min(c.start_time for c in present),
            end_time=max(c.end_time for c in present),
            primary_text=primary.text if primary is not None else "",
            secondary_text=secondary.text if secondary is not None else "",
            alignment_score=score,
            alignment_method=method,
            has_primary=primary is not None,
            has_secondary=secondary is not None,
            primary_indices=(primary_index,) if primary is not None and primary_index is not None else (),
            secondary_indices=(secondary_index,) if secondary is not None and secondary_index is not None else (),
        )

    def to_dict(self) -> dict[str, Any]:
        """Forme camelCase consommée par la couche d'affichage."""
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "primaryText": self.primary_text,
            "secondaryText": self.secondary_text,
            "alignmentScore": self.alignment_score,
            "alignmentMethod": self.alignment_method.value,
            "hasPrimary": self.has_primary,
            "hasSecondary": self.has_secondary,
            "duration": self.duration,
        }


# Clés acceptées par AlignmentConfig.updated() (camelCase de l'extension + snake_case).
_CONFIG_KEY_ALIASES = {
    "timeTolerance": "time_tolerance",
    "contentThreshold": "content_threshold",
    "minAlignmentScore": "min_alignment_score",
}


@dataclass(frozen=True)
class AlignmentConfig:
    """Paramètres d'alignement (non persistés par le moteur)."""

    time_tolerance: float = 0.5
    """Tolérance temporelle (secondes) pour la recherche d'une paire à un instant donné."""
    content_threshold: float = 0.6
    """Seuil de similarité pour les stratégies content / enhanced-content."""
    min_alignment_score: float = 0.4
    """Score minimal pour accepter un appariement (time / hybrid)."""

    def validate(self) -> "AlignmentConfig":
        """Lève AlignmentConfigError si une valeur est hors bornes ; retourne self."""
        for name in ("time_tolerance", "content_threshold", "min_alignment_score"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise AlignmentConfigError(f"'{name}' doit être un nombre (reçu {value!r}).")
        if self.time_tolerance < 0:
            raise AlignmentConfigError(f"'time_tolerance' doit être >= 0 (reçu {self.time_tolerance}).")
        for name in ("content_threshold", "min_alignment_score"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise AlignmentConfigError(f"'{name}' doit être compris entre 0 et 1 (reçu {value}).")
        return self

    def updated(self, partial: Mapping[str, Any] | None = None, **kwargs: Any) -> "AlignmentConfig":
        """
        Fusion partielle : les champs non fournis gardent leur valeur.
        Accepte les clés camelCase (timeTolerance...) et snake_case ; les clés inconnues
        et les valeurs None sont ignorées.
        """
        known = {f.name for f in fields(self)}
        changes: dict[str, Any] = {}
        for key, value in {**dict(partial or {}), **kwargs}.items():
            name = _CONFIG_KEY_ALIASES.get(key, key)
            if name not in known:
                logger.debug("Clé de configuration inconnue ignorée: %s", key)
                continue
            if value is None:
                continue
            changes[name] = value
        return replace(self, **changes).validate()

    def to_dict(self) -> dict[str, float]:
        return {
            "timeTolerance": self.time_tolerance,
            "contentThreshold": self.content_threshold,
            "minAlignmentScore": self.min_alignment_score,
        }


@dataclass(frozen=True)
class AlignmentStats:
    """Statistiques d'une exécution d'alignement."""

    total_pairs: int = 0
    successful_alignments: int = 0
    time_based_alignments: int = 0
    content_based_alignments: int = 0
    hybrid_alignments: int = 0
    average_score: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        return {
            "totalPairs": data["total_pairs"],
            "successfulAlignments": data["successful_alignments"],
            "timeBasedAlignments": data["time_based_alignments"],
            "contentBasedAlignments": data["content_based_alignments"],
            "hybridAlignments": data["hybrid_alignments"],
            "averageScore": data["average_score"],
        }


@dataclass(frozen=True)
class AlignmentResult:
    """Résultat d'un appel d'alignement : paires ordonnées + statistiques."""

    pairs: list[AlignedPair]
    stats: AlignmentStats
    strategy: AlignmentStrategy = AlignmentStrategy.HYBRID
