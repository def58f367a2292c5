"""Utilitaires texte."""

import re

# Tags de style (VTT <v Name>, <i>, <b>, <c.class>...) et balises HTML héritées des SRT.
MARKUP_TAG = re.compile(r"</?[a-zA-Z][^>]*>")


def normalize_whitespace(text: str) -> str:
    """Remplace les séquences d'espaces/blancs par un seul espace."""
    return " ".join(text.split())


def strip_markup(text: str) -> str:
    """Supprime les balises de style et normalise les blancs (sauts de ligne compris)."""
    if not text:
        return ""
    return normalize_whitespace(MARKUP_TAG.sub(" ", text))
