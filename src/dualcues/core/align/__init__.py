"""Alignement cues primaires ↔ cues secondaires (pistes bilingues)."""

from dualcues.core.align.similarity import (
    jaro,
    levenshtein_distance,
    levenshtein_similarity,
    cosine,
    preprocess_text,
    content_similarity,
    extract_keywords,
    keyword_similarity,
    structural_features,
    structural_similarity,
)
from dualcues.core.align.strategies import (
    TimeAlignment,
    ContentAlignment,
    EnhancedContentAlignment,
    HybridAlignment,
    get_strategy,
    time_overlap,
    time_alignment_score,
    position_score,
)
from dualcues.core.align.postprocess import (
    sort_by_start_time,
    merge_adjacent,
    compute_stats,
    post_process,
)
from dualcues.core.align.engine import (
    AlignmentEngine,
    align_subtitles,
    normalize_cue,
    normalize_cues,
)
from dualcues.core.align.lookup import (
    find_pair_at_time,
    build_time_index,
    find_pair_by_time_index,
)

__all__ = [
    "jaro",
    "levenshtein_distance",
    "levenshtein_similarity",
    "cosine",
    "preprocess_text",
    "content_similarity",
    "extract_keywords",
    "keyword_similarity",
    "structural_features",
    "structural_similarity",
    "TimeAlignment",
    "ContentAlignment",
    "EnhancedContentAlignment",
    "HybridAlignment",
    "get_strategy",
    "time_overlap",
    "time_alignment_score",
    "position_score",
    "sort_by_start_time",
    "merge_adjacent",
    "compute_stats",
    "post_process",
    "AlignmentEngine",
    "align_subtitles",
    "normalize_cue",
    "normalize_cues",
    "find_pair_at_time",
    "build_time_index",
    "find_pair_by_time_index",
]
