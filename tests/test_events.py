from datetime import datetime, timedelta, timezone

from models import NewsRecord, news_id

PUBLISHED = datetime(2025, 1, 10, 8, 0, tzinfo=timezone.utc)


def make_news(title: str, summary: str = "", published_at: datetime = PUBLISHED) -> NewsRecord:
    link = "https://example.com/berita"
    return NewsRecord(
        id=news_id("Antara", link, published_at),
        title=title,
        source="Antara",
        published_at=published_at,
        link=link,
        summary=summary,
        entities=["Menteri Perhubungan"],
    )


def test_event_terms_mark_events(detector):
    assert detector.looks_like_event("Menhub resmikan terminal", "")
    assert detector.looks_like_event("Berita", "Rapat koordinasi angkutan lebaran")


def test_future_marker_must_be_whole_word(detector):
    assert detector.has_future_marker("Besok ada pelepasan pemudik")
    assert detector.has_future_marker("Menhub akan hadir")
    assert not detector.has_future_marker("kebijakan baru untuk makanan")


def test_date_patterns_mark_events(detector):
    assert detector.looks_like_event("Jadwal 17/08/2025", "")
    assert detector.looks_like_event("Acara pada 5 Januari 2026", "")
    assert detector.looks_like_event("Agenda 12 mei", "")


def test_plain_news_is_not_an_event(detector):
    assert not detector.looks_like_event(
        "Harga tiket pesawat turun",
        "Penumpang senang dengan kebijakan baru",
    )


def test_guess_location(detector):
    assert detector.guess_location("Menhub resmikan terminal baru di Makassar hari ini") == "Makassar"
    assert detector.guess_location("Rapat di Kantor Pusat Kemenhub Jakarta, Senin") == "Kantor Pusat Kemenhub Jakarta"
    assert detector.guess_location("Di Bandara Soekarno-Hatta antrean mengular") == "Bandara Soekarno-Hatta"


def test_guess_location_placeholder(detector):
    assert detector.guess_location("rapat berlangsung lancar") == "—"
    assert detector.guess_location("Terminal diresmikan Menhub") == "—"
    assert detector.guess_location("") == "—"


def test_event_date_shift(detector):
    assert detector.event_date(PUBLISHED, "Menhub akan meninjau pelabuhan") == PUBLISHED + timedelta(days=1)
    assert detector.event_date(PUBLISHED, "Menhub meninjau pelabuhan") == PUBLISHED


def test_infer_builds_event(detector):
    news = make_news("Menhub akan meresmikan pelabuhan di Bitung")
    event = detector.infer(news)
    assert event.id == f"ev-{news.id}"
    assert event.date == PUBLISHED + timedelta(days=1)
    assert event.attended_by_minister is True
    assert event.location == "Bitung"
    assert event.tags == ["Menteri Perhubungan"]
    assert event.link == news.link


def test_infer_without_minister(detector):
    event = detector.infer(make_news("Seminar keselamatan pelayaran di Surabaya"))
    assert event.attended_by_minister is False
    assert event.location == "Surabaya"


def test_infer_skips_non_events(detector):
    assert detector.infer(make_news("Harga tiket pesawat turun")) is None


def test_infer_window_uses_shifted_date(detector):
    since = PUBLISHED + timedelta(hours=12)
    assert detector.infer(make_news("Besok rapat koordinasi mudik"), since) is not None
    assert detector.infer(make_news("Rapat koordinasi mudik"), since) is None


def test_event_date_shift_at_calendar_end(detector):
    last = datetime(9999, 12, 31, 12, 0, tzinfo=timezone.utc)
    assert detector.event_date(last, "Menhub akan hadir") == last
