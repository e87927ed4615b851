"""
Stage 2: Intent Classification

Weighted keyword scoring over a closed set of business intents.

Responsibilities:
- Score every intent from its bilingual (English + Hindi/Marathi) keyword set
- Pick the best intent, breaking ties by a declared priority order
- Fall back to GENERAL_INQUIRY when nothing clears the threshold
"""

import re
import logging
from dataclasses import dataclass, field
from typing import List, Dict
from enum import Enum

logger = logging.getLogger(__name__)


class IntentType(str, Enum):
    """Business question categories"""
    SALES_INQUIRY = "sales_inquiry"
    INVENTORY_CHECK = "inventory_check"
    CUSTOMER_ANALYSIS = "customer_analysis"
    FINANCIAL_ANALYSIS = "financial_analysis"
    STATUS_CHECK = "status_check"
    GENERAL_INQUIRY = "general_inquiry"


@dataclass
class IntentResult:
    """Result of intent classification"""
    intent: IntentType
    confidence: float = 0.0
    scores: Dict[IntentType, float] = field(default_factory=dict)
    matched_keywords: List[str] = field(default_factory=list)


class IntentClassifier:
    """
    Stage 2: Keyword Intent Classifier

    score(intent) = matched keywords / keyword set size * category weight.
    Deterministic: the same text always yields the same intent and confidence.
    """

    # Intent keyword sets (English + Hindi/Marathi) with category weight
    INTENT_KEYWORDS = {
        IntentType.SALES_INQUIRY: {
            'keywords': [
                'sales', 'sell', 'revenue', 'income', 'earning',
                'कमाई', 'बिक्री', 'बेचा',
            ],
            'weight': 1.0
        },

        IntentType.INVENTORY_CHECK: {
            'keywords': [
                'stock', 'inventory', 'warehouse', 'bucket', 'product',
                'स्टॉक', 'माल', 'भंडार',
            ],
            'weight': 1.0
        },

        IntentType.CUSTOMER_ANALYSIS: {
            'keywords': [
                'customer', 'buyer', 'client',
                'ग्राहक', 'खरीदार', 'कस्टमर',
            ],
            'weight': 1.0
        },

        IntentType.FINANCIAL_ANALYSIS: {
            'keywords': [
                'profit', 'expense', 'cost', 'financial', 'money', 'cash',
                'मुनाफा', 'खर्च', 'पैसा',
            ],
            'weight': 1.0
        },

        # Status words show up in every kind of question ("current stock",
        # "today's sales"), so they only win when nothing specific matches
        IntentType.STATUS_CHECK: {
            'keywords': [
                'status', 'current', 'now', 'today',
                'अभी', 'आज', 'हाल',
            ],
            'weight': 0.4
        },
    }

    # Tie-break order, most specific data need first
    INTENT_PRIORITY = [
        IntentType.SALES_INQUIRY,
        IntentType.INVENTORY_CHECK,
        IntentType.CUSTOMER_ANALYSIS,
        IntentType.FINANCIAL_ANALYSIS,
        IntentType.STATUS_CHECK,
    ]

    def __init__(self, min_score: float = 0.1):
        """
        Initialize Intent Classifier.

        Args:
            min_score: Best score below this yields GENERAL_INQUIRY
        """
        self.min_score = min_score

    def classify(self, query: str) -> IntentResult:
        """
        Classify a user query.

        Args:
            query: User query string (any case)

        Returns:
            IntentResult with intent, confidence and per-intent scores
        """
        normalized = self._normalize_query(query)
        scores, matched = self._score_intents(normalized)

        best_intent = IntentType.GENERAL_INQUIRY
        best_score = 0.0
        # Strict ">" keeps the earlier intent in priority order on a tie
        for intent in self.INTENT_PRIORITY:
            if scores[intent] > best_score:
                best_intent = intent
                best_score = scores[intent]

        if best_score < self.min_score:
            logger.info(f"Intent unclassified (best score={best_score:.3f}), using general_inquiry")
            return IntentResult(
                intent=IntentType.GENERAL_INQUIRY,
                confidence=0.0,
                scores=scores,
            )

        logger.info(f"Intent classified: {best_intent.value} (confidence={best_score:.2f})")
        return IntentResult(
            intent=best_intent,
            confidence=min(1.0, best_score),
            scores=scores,
            matched_keywords=matched[best_intent],
        )

    def _normalize_query(self, query: str) -> str:
        """Lower-case and collapse whitespace"""
        return re.sub(r'\s+', ' ', query.lower()).strip()

    def _score_intents(self, query: str):
        """Score each intent by the share of its keywords present in the query"""
        scores: Dict[IntentType, float] = {}
        matched: Dict[IntentType, List[str]] = {}

        for intent, config in self.INTENT_KEYWORDS.items():
            keywords = config['keywords']
            hits = [kw for kw in keywords if kw in query]
            matched[intent] = hits
            scores[intent] = (len(hits) / len(keywords)) * config['weight']

        return scores, matched
