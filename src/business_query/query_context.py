"""
Request-scoped query types shared by the pipeline stages.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from .stage1_language_detector import Language
from .stage2_intent_classifier import IntentType
from .stage3_entity_extractor import ExtractedEntities


@dataclass(frozen=True)
class RawQuery:
    """User text as received"""
    text: str
    received_at: datetime = field(default_factory=datetime.now)


@dataclass
class QueryContext:
    """Classification of one query; a pure function of its text"""
    language: Language
    intent: IntentType
    entities: ExtractedEntities = field(default_factory=ExtractedEntities)
    timeframe: List[str] = field(default_factory=list)
    confidence: float = 0.0

    @classmethod
    def fallback(cls) -> "QueryContext":
        """Default classification used when the pipeline falls back"""
        return cls(language=Language.ENGLISH, intent=IntentType.GENERAL_INQUIRY)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "language": self.language.value,
            "intent": self.intent.value,
            "entities": self.entities.to_dict(),
            "timeframe": list(self.timeframe),
            "confidence": self.confidence,
        }
