from config_loader import QuoteConfig, VocabularyConfig
from models import QuoteCandidate
from quotes import QuoteExtractor, QuoteScorer, quote_source_text


def test_fragment_band_lower_edge(extractor):
    assert extractor.extract_quoted_fragments('x "' + "a" * 8 + '" y') == ["a" * 8]
    assert extractor.extract_quoted_fragments('x "' + "a" * 7 + '" y') == []


def test_fragment_band_upper_edge(extractor):
    assert extractor.extract_quoted_fragments('x "' + "a" * 400 + '" y') == ["a" * 400]
    assert extractor.extract_quoted_fragments('x "' + "a" * 401 + '" y') == []


def test_fragments_follow_order_of_appearance(extractor):
    text = 'Awal "lima enam tujuh" lalu “satu dua tiga empat” akhir'
    assert extractor.extract_quoted_fragments(text) == [
        "lima enam tujuh",
        "satu dua tiga empat",
    ]


def test_fragments_are_not_deduplicated(extractor):
    text = '"Kami terus bekerja keras." Lalu ia mengulang, "Kami terus bekerja keras."'
    assert extractor.extract_quoted_fragments(text) == [
        "Kami terus bekerja keras.",
        "Kami terus bekerja keras.",
    ]


def test_straight_quotes_nested_in_curly_quotes_are_found(extractor):
    text = "“Menhub bilang \"kami siap bekerja keras\" tadi pagi”"
    assert extractor.extract_quoted_fragments(text) == [
        'Menhub bilang "kami siap bekerja keras" tadi pagi',
        "kami siap bekerja keras",
    ]


def test_fragment_drops_trailing_comma(extractor):
    text = '"Ini adalah bukti komitmen kami," kata Menhub'
    assert extractor.extract_quoted_fragments(text) == ["Ini adalah bukti komitmen kami"]


def test_attributed_fragments_need_alias_and_speech_verb(extractor):
    text = (
        "Menhub mengatakan pembangunan jalan tol berjalan lancar. "
        "Menhub meninjau lokasi proyek bersama jajaran. "
        "Warga mengatakan jalan itu sudah lama ditunggu."
    )
    assert extractor.extract_attributed_fragments(text) == [
        "Menhub mengatakan pembangunan jalan tol berjalan lancar."
    ]


def test_attributed_fragments_skip_short_sentences(extractor):
    assert extractor.extract_attributed_fragments("Kata Menhub singkat.") == []


def test_speech_verb_matches_whole_words_only(scorer):
    assert scorer.has_speech_verb("Kata Menhub di lokasi")
    assert scorer.has_speech_verb("kami siap, ujar dia")
    assert not scorer.has_speech_verb("katakan saja terus terang")


def test_score_direct_quotes_and_ministry_is_seven(scorer):
    candidate = scorer.score("Menhub “siap bekerja” foto:")
    assert candidate.score == 7
    assert candidate.reasons == ["direct-quotes", "mentions-ministry"]


def test_score_all_signals(scorer):
    fragment = "Menhub mengatakan “kami siap membangun terminal baru” di Makassar pada hari ini."
    candidate = scorer.score(fragment)
    assert candidate.score == 12
    assert candidate.reasons == [
        "direct-quotes", "mentions-ministry", "speech-verb", "good-length", "contentful",
    ]


def test_score_nothing_triggered(scorer):
    candidate = scorer.score("http://x.com")
    assert candidate.score == 0
    assert candidate.reasons == []


def test_score_uses_configured_weights():
    config = QuoteConfig()
    config.weights.contentful = 5
    scorer = QuoteScorer(VocabularyConfig(), config)
    assert scorer.score("teks biasa saja").score == 5


def test_select_prefers_higher_score(extractor):
    winner = extractor.select([
        QuoteCandidate(text="pendek", score=3, reasons=[]),
        QuoteCandidate(text="yang jauh lebih panjang", score=6, reasons=[]),
    ])
    assert winner.text == "yang jauh lebih panjang"


def test_select_breaks_ties_with_shorter_text(extractor):
    winner = extractor.select([
        QuoteCandidate(text="teks yang lebih panjang", score=5, reasons=[]),
        QuoteCandidate(text="teks pendek", score=5, reasons=[]),
    ])
    assert winner.text == "teks pendek"


def test_select_prefers_direct_tier(extractor):
    winner = extractor.select([
        QuoteCandidate(text="kalimat atribusi", score=12, reasons=[], origin="attributed"),
        QuoteCandidate(text="kutipan langsung", score=1, reasons=[], origin="direct"),
    ])
    assert winner.origin == "direct"


def test_select_truncates_long_winner(extractor):
    winner = extractor.select([QuoteCandidate(text="a" * 300, score=1, reasons=[])])
    assert len(winner.text) == 278
    assert winner.text == "a" * 277 + "…"


def test_select_empty(extractor):
    assert extractor.select([]) is None


def test_best_quote_prefers_enclosed_fragment(extractor):
    text = quote_source_text(
        "Menhub resmikan terminal baru di Makassar hari ini",
        '"Ini adalah bukti komitmen kami," kata Menhub',
    )
    best = extractor.best_quote(text)
    assert best.text == "Ini adalah bukti komitmen kami"
    assert best.origin == "direct"


def test_best_quote_with_repeated_fragment(extractor):
    text = 'Menhub berpesan: "Kami terus bekerja keras." Ia mengulang, "Kami terus bekerja keras."'
    assert len(extractor.candidates(text)) == 2
    assert extractor.best_quote(text).text == "Kami terus bekerja keras."


def test_best_quote_falls_back_to_mentioning_sentence(extractor):
    text = "Menhub meninjau pelabuhan Tanjung Priok pagi ini bersama jajaran."
    best = extractor.best_quote(text)
    assert best.origin == "fallback"
    assert best.text == text


def test_best_quote_none_without_candidates(extractor):
    assert extractor.best_quote("Cuaca cerah di Jakarta hari ini tanpa hujan sama sekali.") is None
    assert extractor.best_quote("") is None


def test_synthetic_vocabulary():
    vocabulary = VocabularyConfig(ministry_aliases=["minister"], speech_verbs=["said"])
    extractor = QuoteExtractor(vocabulary, QuoteConfig())
    text = "The minister said the new port opens soon. Nothing else happened today at all."
    assert extractor.extract_attributed_fragments(text) == [
        "The minister said the new port opens soon."
    ]


def test_quote_source_text_terminates_title():
    assert quote_source_text("Judul berita", "Isi.") == "Judul berita. Isi."
    assert quote_source_text("Judul berita?", "Isi.") == "Judul berita? Isi."
    assert quote_source_text("", "Isi.") == "Isi."
