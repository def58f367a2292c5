"""Configuration du logging pour la ligne de commande et les hôtes du moteur."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "dualcues"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
    *,
    root_level: int = logging.WARNING,
) -> logging.Logger:
    """
    Installe un handler stderr (et un fichier si `log_file`) sur le logger racine et
    retourne le logger du paquet.

    Les loggers `dualcues.*` suivent `level` ; les bibliothèques tierces restent à
    `root_level` (WARNING par défaut), pour qu'un --log-level DEBUG n'affiche que nos
    traces d'alignement. Un nouvel appel remplace les handlers posés par le précédent
    sans toucher aux autres (pytest, application hôte).
    """
    formatter = logging.Formatter(LOG_FORMAT)
    root = logging.getLogger()
    for handler in [h for h in root.handlers if getattr(h, "_dualcues", False)]:
        root.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler._dualcues = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(root_level)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    return logger


def parse_log_level(name: str | None, default: int = logging.INFO) -> int:
    """Convertit "debug", "INFO", "20"... en niveau logging ; défaut si inconnu."""
    candidate = (name or "").strip()
    if not candidate:
        return default
    if candidate.isdigit():
        return int(candidate)
    level = logging.getLevelName(candidate.upper())
    return level if isinstance(level, int) else default
