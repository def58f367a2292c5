"""
Similarité textuelle pour l'alignement de pistes bilingues.
Levenshtein via rapidfuzz ; Jaro, cosinus, mots-clés et structure calculés ici.
"""

from __future__ import annotations

import math
import re
from collections import Counter

from rapidfuzz.distance import Levenshtein

_NON_WORD = re.compile(r"[^\w\s]")
_MULTI_SPACE = re.compile(r"\s+")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")

# Mots vides multilingues (zh / en) exclus des mots-clés.
STOP_WORDS = frozenset({"的", "是", "在", "了", "和", "with", "the", "a", "an", "and", "or", "but"})

CONTENT_WEIGHTS = (0.4, 0.3, 0.3)  # jaro, levenshtein, cosinus


def preprocess_text(text: str) -> str:
    """Minuscules, ponctuation retirée, espaces normalisés."""
    cleaned = _NON_WORD.sub("", (text or "").lower())
    return _MULTI_SPACE.sub(" ", cleaned).strip()


def jaro(s1: str, s2: str) -> float:
    """
    Similarité de Jaro (sans bonus de Winkler), entre 0 et 1.
    Appariement glouton de gauche à droite dans la fenêtre max(len) // 2 - 1, puis
    (m / |s1| + m / |s2| + (m - t / 2) / m) / 3 où t compte les caractères appariés
    hors d'ordre (t / 2 en division réelle : rapidfuzz arrondit t // 2).
    """
    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0
    window = max(max(len(s1), len(s2)) // 2 - 1, 0)
    matched2 = [False] * len(s2)
    matched1: list[str] = []
    for i, ch in enumerate(s1):
        for j in range(max(0, i - window), min(i + window + 1, len(s2))):
            if not matched2[j] and s2[j] == ch:
                matched2[j] = True
                matched1.append(ch)
                break
    m = len(matched1)
    if m == 0:
        return 0.0
    in_order2 = [ch for ch, used in zip(s2, matched2) if used]
    transpositions = sum(a != b for a, b in zip(matched1, in_order2))
    return (m / len(s1) + m / len(s2) + (m - transpositions / 2) / m) / 3


def levenshtein_distance(s1: str, s2: str) -> int:
    """Distance d'édition (insertion, suppression, substitution à coût 1)."""
    return Levenshtein.distance(s1, s2)


def levenshtein_similarity(s1: str, s2: str) -> float:
    max_len = max(len(s1), len(s2))
    if max_len == 0:
        return 1.0
    return 1.0 - levenshtein_distance(s1, s2) / max_len


def _term_vector(text: str) -> Counter[str]:
    return Counter(text.lower().split())


def cosine(s1: str, s2: str) -> float:
    """Cosinus entre vecteurs de fréquences de termes (tokens séparés par des blancs)."""
    v1, v2 = _term_vector(s1), _term_vector(s2)
    dot = sum(count * v2[term] for term, count in v1.items())
    norm1 = math.sqrt(sum(c * c for c in v1.values()))
    norm2 = math.sqrt(sum(c * c for c in v2.values()))
    if norm1 == 0 or norm2 == 0:
        return 0.0
    return dot / (norm1 * norm2)


def content_similarity(text1: str, text2: str) -> float:
    """
    Similarité de contenu : 0.4·Jaro + 0.3·Levenshtein + 0.3·cosinus sur le texte prétraité.
    Retourne 0 si l'un des textes est vide ou absent.
    """
    if not text1 or not text2:
        return 0.0
    clean1, clean2 = preprocess_text(text1), preprocess_text(text2)
    w_jaro, w_lev, w_cos = CONTENT_WEIGHTS
    return (
        w_jaro * jaro(clean1, clean2)
        + w_lev * levenshtein_similarity(clean1, clean2)
        + w_cos * cosine(clean1, clean2)
    )


def extract_keywords(text: str) -> set[str]:
    """Tokens de plus de 2 caractères, hors mots vides."""
    return {w for w in preprocess_text(text).split() if len(w) > 2 and w not in STOP_WORDS}


def keyword_similarity(text1: str, text2: str) -> float:
    """Indice de Jaccard sur les ensembles de mots-clés."""
    if not text1 or not text2:
        return 0.0
    k1, k2 = extract_keywords(text1), extract_keywords(text2)
    union = k1 | k2
    if not union:
        return 0.0
    return len(k1 & k2) / len(union)


def structural_features(text: str) -> dict[str, float]:
    words = text.split()
    return {
        "length": float(len(text)),
        "word_count": float(len(words)),
        "sentence_count": float(len(_SENTENCE_SPLIT.split(text))),
        "avg_word_length": sum(len(w) for w in words) / len(words) if words else 0.0,
    }


def structural_similarity(text1: str, text2: str) -> float:
    """Moyenne, par caractéristique, de 1 - |écart| / max (1 si les deux valent 0)."""
    if not text1 or not text2:
        return 0.0
    f1, f2 = structural_features(text1), structural_features(text2)
    total = 0.0
    for key, a in f1.items():
        b = f2[key]
        high = max(a, b)
        total += 1.0 if high == 0 else 1.0 - abs(a - b) / high
    return total / len(f1)
