"""Product-name normalization used for comparing OCR'd names."""

import unicodedata


def normalize(raw: str) -> str:
    """
    Reduce a raw product name to a single lowercase alphanumeric token.

    Accents are decomposed and dropped ("Löwenbräu" -> "lowenbrau"); whitespace,
    punctuation and currency symbols are removed. The result is stable under
    repeated application. An empty result means the name is unmatchable.
    """
    if not raw:
        return ""
    decomposed = unicodedata.normalize("NFKD", raw)
    lowered = unicodedata.normalize("NFKD", decomposed.lower())
    return "".join(ch for ch in lowered if ch.isalnum())
