"""
Stage 1: Language Detection

Script/keyword heuristic for Hindi, Marathi and English queries.
"""

import re
from enum import Enum


class Language(str, Enum):
    """Supported query/response languages"""
    HINDI = "hindi"
    MARATHI = "marathi"
    ENGLISH = "english"


DEVANAGARI_PATTERN = re.compile(r"[ऀ-ॿ]")

# Function words used in Marathi but not in Hindi
MARATHI_WORDS = ("आहे", "काय", "कसे", "कधी", "कुठे")


class LanguageDetector:
    """Classify text as Hindi, Marathi or English. Never fails."""

    def detect(self, text: str) -> Language:
        if not DEVANAGARI_PATTERN.search(text):
            return Language.ENGLISH
        if any(word in text for word in MARATHI_WORDS):
            return Language.MARATHI
        return Language.HINDI


def detect_language(text: str) -> Language:
    """Module-level shortcut used by the API error renderer"""
    return LanguageDetector().detect(text)
