"""Lecture / écriture de la configuration d'alignement (fichier TOML)."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from dualcues.core.models import AlignmentConfig, AlignmentConfigError

logger = logging.getLogger(__name__)

CONFIG_SECTION = "alignment"


def read_toml(path: Path) -> dict[str, Any]:
    """Lit un fichier TOML (stdlib tomllib)."""
    with open(path, "rb") as file_obj:
        return tomllib.load(file_obj)


def write_toml(path: Path, data: dict[str, Any], section: str | None = None) -> None:
    """Écrit un fichier TOML plat, éventuellement sous une table [section]."""
    lines: list[str] = [f"[{section}]"] if section else []
    for key, value in data.items():
        if isinstance(value, str):
            escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
            lines.append(f'{key} = "{escaped}"')
        elif isinstance(value, bool):
            lines.append(f"{key} = {str(value).lower()}")
        elif isinstance(value, (int, float)):
            lines.append(f"{key} = {value}")
        else:
            lines.append(f'{key} = "{value!s}"')
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def load_alignment_config(path: Path, base: AlignmentConfig | None = None) -> AlignmentConfig:
    """
    Charge une AlignmentConfig depuis un fichier TOML.
    Les clés peuvent être à la racine ou sous [alignment], en camelCase ou snake_case ;
    les champs absents gardent la valeur de `base` (défauts sinon).
    Lève AlignmentConfigError si le fichier est illisible ou une valeur hors bornes.
    """
    path = Path(path)
    try:
        data = read_toml(path)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise AlignmentConfigError(f"Impossible de lire {path}: {exc}") from exc
    section = data.get(CONFIG_SECTION)
    if section is not None and not isinstance(section, dict):
        raise AlignmentConfigError(f"{path}: [{CONFIG_SECTION}] doit être une table.")
    values = section if section is not None else data
    config = (base or AlignmentConfig()).updated(values)
    logger.debug("Configuration chargée depuis %s : %s", path, config.to_dict())
    return config


def save_alignment_config(path: Path, config: AlignmentConfig) -> None:
    """Écrit la configuration sous [alignment] (clés snake_case)."""
    write_toml(
        Path(path),
        {
            "time_tolerance": config.time_tolerance,
            "content_threshold": config.content_threshold,
            "min_alignment_score": config.min_alignment_score,
        },
        section=CONFIG_SECTION,
    )
