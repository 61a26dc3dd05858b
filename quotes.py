"""Quotation extraction and scoring.

Two extraction tiers feed one additive scorer:

1. Direct fragments enclosed in “…” or "…".
2. Attributed sentences: a ministry alias plus a speech verb, for articles
   that paraphrase instead of quoting.

When neither tier yields anything, the first sentence mentioning the ministry
is scored as a last resort. Each signal adds a fixed weight and records its
name in `reasons`, so selection is a plain sort.
"""
import re
from typing import Iterable, List, Optional, Tuple

from config_loader import QuoteConfig, VocabularyConfig
from logging_setup import get_logger
from models import QuoteCandidate
from text import normalize_whitespace, segment_sentences

logger = get_logger("pipeline.quotes")

URL_RE = re.compile(r"https?://", re.IGNORECASE)
_TRAILING_PUNCT_RE = re.compile(r"[\s,;:\-–—]+$")

TIER_ORDER = ("direct", "attributed", "fallback")


def word_pattern(words: Iterable[str]) -> re.Pattern:
    """Compile a case-insensitive whole-word alternation. Empty list never matches."""
    cleaned = sorted({w.strip().lower() for w in words if w and w.strip()}, key=len, reverse=True)
    if not cleaned:
        return re.compile(r"(?!)")
    alternation = "|".join(re.escape(w) for w in cleaned)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)


def enclosed_patterns(min_chars: int, max_chars: int) -> Tuple[re.Pattern, re.Pattern]:
    """Curly and straight double quotes with an inner length band, one pattern each."""
    band = f"{{{min_chars},{max_chars}}}"
    return (
        re.compile(rf"“([^”]{band})”"),
        re.compile(rf"\"([^\"]{band})\""),
    )


class QuoteScorer:
    """Additive, explainable scoring of a quote candidate."""

    def __init__(self, vocabulary: VocabularyConfig, config: QuoteConfig):
        self.config = config
        self.weights = config.weights
        self.aliases = [a.lower() for a in vocabulary.ministry_aliases if a.strip()]
        self.boilerplate = [b.lower() for b in vocabulary.boilerplate_markers if b.strip()]
        self._speech_re = word_pattern(vocabulary.speech_verbs)
        self._enclosed_res = enclosed_patterns(config.fragment_min_chars, config.fragment_max_chars)

    def mentions_ministry(self, text: str) -> bool:
        lowered = text.lower()
        return any(alias in lowered for alias in self.aliases)

    def has_speech_verb(self, text: str) -> bool:
        return self._speech_re.search(text) is not None

    def score(self, fragment: str, origin: str = "direct") -> QuoteCandidate:
        """
        Score one fragment.

        Signals (default weights): direct-quotes +4, mentions-ministry +3,
        speech-verb +2, good-length +2, contentful +1.
        """
        text = normalize_whitespace(fragment)
        lowered = text.lower()
        reasons: List[str] = []
        score = 0

        if any(p.search(text) for p in self._enclosed_res):
            score += self.weights.direct_quotes
            reasons.append("direct-quotes")

        if self.mentions_ministry(text):
            score += self.weights.mentions_ministry
            reasons.append("mentions-ministry")

        if self.has_speech_verb(text):
            score += self.weights.speech_verb
            reasons.append("speech-verb")

        if self.config.ideal_min_chars <= len(text) <= self.config.ideal_max_chars:
            score += self.weights.good_length
            reasons.append("good-length")

        if not URL_RE.search(text) and not any(m in lowered for m in self.boilerplate):
            score += self.weights.contentful
            reasons.append("contentful")

        return QuoteCandidate(text=text, score=score, reasons=reasons, origin=origin)


class QuoteExtractor:
    """Find, score and pick the best quotation in an article."""

    def __init__(
        self,
        vocabulary: VocabularyConfig,
        config: QuoteConfig,
        scorer: Optional[QuoteScorer] = None
    ):
        self.config = config
        self.scorer = scorer or QuoteScorer(vocabulary, config)
        self._enclosed_res = enclosed_patterns(config.fragment_min_chars, config.fragment_max_chars)

    def extract_quoted_fragments(self, text: str) -> List[str]:
        """
        Fragments enclosed in paired quotes, in order of appearance.

        Not deduplicated. Trailing clause punctuation left inside the quotes
        ("…kami," kata Menhub) is dropped.
        """
        if not text:
            return []

        # Each style is scanned on its own so a straight pair nested in a
        # curly one is found too
        matches = sorted(
            (m for pattern in self._enclosed_res for m in pattern.finditer(text)),
            key=lambda m: m.start()
        )

        fragments = []
        for match in matches:
            cleaned = _TRAILING_PUNCT_RE.sub("", normalize_whitespace(match.group(1)))
            if len(cleaned) >= self.config.fragment_min_chars:
                fragments.append(cleaned)
        return fragments

    def extract_attributed_fragments(self, text: str) -> List[str]:
        """Sentences that name the ministry and use a speech verb."""
        if not text:
            return []

        out = []
        for sentence in segment_sentences(text):
            if len(sentence) < self.config.attributed_min_chars:
                continue
            if self.scorer.mentions_ministry(sentence) and self.scorer.has_speech_verb(sentence):
                out.append(sentence)
        return out

    def _fallback_fragment(self, text: str) -> Optional[str]:
        for sentence in segment_sentences(text):
            if len(sentence) >= self.config.attributed_min_chars and self.scorer.mentions_ministry(sentence):
                return sentence
        return None

    def candidates(self, text: str) -> List[QuoteCandidate]:
        """All scored candidates, direct fragments first."""
        found = [self.scorer.score(f, "direct") for f in self.extract_quoted_fragments(text)]
        found.extend(
            self.scorer.score(s, "attributed") for s in self.extract_attributed_fragments(text)
        )

        if not found:
            fallback = self._fallback_fragment(text)
            if fallback:
                found.append(self.scorer.score(fallback, "fallback"))
        return found

    def select(self, candidates: List[QuoteCandidate]) -> Optional[QuoteCandidate]:
        """
        Pick the winner.

        The best available tier wins outright; inside it, higher score first,
        then the shorter text, then the first one found.
        """
        for tier in TIER_ORDER:
            pool = [c for c in candidates if c.origin == tier]
            if pool:
                best = sorted(pool, key=lambda c: (-c.score, len(c.text)))[0]
                return QuoteCandidate(
                    text=self.truncate(best.text),
                    score=best.score,
                    reasons=list(best.reasons),
                    origin=best.origin,
                )
        return None

    def truncate(self, text: str) -> str:
        if len(text) <= self.config.max_chars:
            return text
        return text[:self.config.truncate_to] + self.config.ellipsis

    def best_quote(self, text: str) -> Optional[QuoteCandidate]:
        """
        Best quotation in normalized article text (title sentence + body).

        Returns:
            Winning candidate or None; no quotation is the common case
        """
        if not text:
            return None

        winner = self.select(self.candidates(text))
        if winner:
            logger.debug(
                "quote_selected",
                score=winner.score,
                reasons=winner.reasons,
                origin=winner.origin,
                length=len(winner.text)
            )
        return winner


def quote_source_text(title: str, body: str) -> str:
    """Title as its own sentence, followed by the body."""
    title = title.strip()
    if not title:
        return body
    if title[-1] not in ".?!":
        title += "."
    return f"{title} {body}".strip()
