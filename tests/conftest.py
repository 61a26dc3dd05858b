from datetime import datetime, timezone

import pytest

from aggregator import Aggregator
from config_loader import AppConfig, QuoteConfig, VocabularyConfig
from quotes import QuoteExtractor, QuoteScorer
from events import EventDetector

NOW = datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def vocabulary() -> VocabularyConfig:
    return VocabularyConfig()


@pytest.fixture
def scorer(vocabulary) -> QuoteScorer:
    return QuoteScorer(vocabulary, QuoteConfig())


@pytest.fixture
def extractor(vocabulary) -> QuoteExtractor:
    return QuoteExtractor(vocabulary, QuoteConfig())


@pytest.fixture
def detector(vocabulary) -> EventDetector:
    return EventDetector(vocabulary)


@pytest.fixture
def aggregator() -> Aggregator:
    return Aggregator(AppConfig())
