"""Keyword relevance gate.

Decides whether a feed item is kept at all. An item passes when the combined
title + body mentions any relevance keyword (ministry/minister aliases by
default), or a transport-domain keyword when that is enabled.
"""
from dataclasses import dataclass
from typing import List, Optional

from config_loader import VocabularyConfig
from logging_setup import get_logger

logger = get_logger("pipeline.relevance")


@dataclass
class RelevanceResult:
    """Result of the relevance gate."""
    passed: bool
    matched_keywords: List[str]
    decision_code: str


class RelevanceFilter:
    """Case-insensitive substring keyword gate."""

    def __init__(self, vocabulary: VocabularyConfig, use_domain_keywords: bool = False):
        self.keywords = [k.lower() for k in vocabulary.relevance_keywords if k.strip()]
        self.domain_keywords = [k.lower() for k in vocabulary.domain_keywords if k.strip()]
        self.use_domain_keywords = use_domain_keywords

    def check(
        self,
        title: str,
        text: str,
        keywords: Optional[List[str]] = None
    ) -> RelevanceResult:
        """
        Check one item.

        Args:
            title: Item title
            text: Normalized body
            keywords: Per-request override of the relevance keywords

        Returns:
            RelevanceResult with the keywords that matched
        """
        combined = f"{title} {text}".lower()
        if not combined.strip():
            return RelevanceResult(passed=False, matched_keywords=[], decision_code="EMPTY_TEXT")

        active = [k.lower() for k in keywords if k.strip()] if keywords else self.keywords
        matched = [k for k in active if k in combined]

        if not matched and self.use_domain_keywords:
            matched = [k for k in self.domain_keywords if k in combined]
            if matched:
                return RelevanceResult(passed=True, matched_keywords=matched, decision_code="DOMAIN_MATCH")

        if not matched:
            logger.debug("relevance_rejected", title=title[:80])
            return RelevanceResult(passed=False, matched_keywords=[], decision_code="NO_KEYWORD")

        return RelevanceResult(passed=True, matched_keywords=matched, decision_code="KEYWORD_MATCH")
