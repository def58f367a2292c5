"""Ligne de commande : aligne deux fichiers de sous-titres et exporte les paires."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from dualcues.core.align import align_subtitles
from dualcues.core.config import load_alignment_config
from dualcues.core.export_utils import export_pairs, pairs_to_bilingual_srt
from dualcues.core.models import AlignmentConfig, AlignmentConfigError, AlignmentStrategy
from dualcues.core.subtitles import SubtitleParseError, parse_subtitle_file
from dualcues.core.utils.logging import parse_log_level, setup_logging

logger = logging.getLogger("dualcues.cli")

EXIT_OK = 0
EXIT_INPUT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dualcues",
        description="Aligne une piste de sous-titres primaire et une piste secondaire.",
    )
    parser.add_argument("primary", type=Path, help="Fichier primaire (SRT, VTT, TTML)")
    parser.add_argument("secondary", type=Path, help="Fichier secondaire (SRT, VTT, TTML)")
    parser.add_argument(
        "--strategy",
        default=AlignmentStrategy.HYBRID.value,
        help="time | content | enhanced-content | hybrid (défaut : hybrid)",
    )
    parser.add_argument("--config", type=Path, help="Fichier TOML de configuration d'alignement")
    parser.add_argument("--time-tolerance", type=float)
    parser.add_argument("--content-threshold", type=float)
    parser.add_argument("--min-score", dest="min_alignment_score", type=float)
    parser.add_argument(
        "--output",
        type=Path,
        help="Fichier d'export (.csv, .tsv, .jsonl, .html, .docx, .srt) ; SRT bilingue sur stdout sinon",
    )
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file", type=Path)
    return parser


def _resolve_config(args: argparse.Namespace) -> AlignmentConfig:
    config = AlignmentConfig()
    if args.config:
        config = load_alignment_config(args.config, base=config)
    return config.updated(
        time_tolerance=args.time_tolerance,
        content_threshold=args.content_threshold,
        min_alignment_score=args.min_alignment_score,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=parse_log_level(args.log_level), log_file=args.log_file)

    try:
        config = _resolve_config(args)
        primary, primary_fmt = parse_subtitle_file(args.primary)
        secondary, secondary_fmt = parse_subtitle_file(args.secondary)
    except (AlignmentConfigError, SubtitleParseError, OSError) as exc:
        logger.error("%s", exc)
        return EXIT_INPUT_ERROR

    logger.info(
        "Piste primaire %s (%s, %d cues), piste secondaire %s (%s, %d cues)",
        args.primary.name,
        primary_fmt,
        len(primary),
        args.secondary.name,
        secondary_fmt,
        len(secondary),
    )
    result = align_subtitles(primary, secondary, args.strategy, config)
    stats = result.stats
    logger.info(
        "Stratégie %s : %d paires, %d appariées, score moyen %.3f",
        result.strategy.value,
        stats.total_pairs,
        stats.successful_alignments,
        stats.average_score,
    )

    if args.output:
        try:
            export_pairs(result.pairs, args.output)
        except OSError as exc:
            logger.error("Export impossible vers %s: %s", args.output, exc)
            return EXIT_INPUT_ERROR
        logger.info("Export écrit : %s", args.output)
    else:
        sys.stdout.write(pairs_to_bilingual_srt(result.pairs))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
