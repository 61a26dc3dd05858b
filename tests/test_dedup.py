from datetime import datetime, timedelta, timezone

from dedup import dedupe, event_key, news_key, quote_key
from models import EventRecord, NewsRecord, QuoteRecord, news_id

T0 = datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)


def make_news(title: str, source: str, published_at: datetime = T0, link: str = "#") -> NewsRecord:
    return NewsRecord(
        id=news_id(source, link, published_at),
        title=title,
        source=source,
        published_at=published_at,
        link=link,
    )


def make_quote(text: str, source: str, date: datetime = T0) -> QuoteRecord:
    return QuoteRecord(
        id=f"q-{news_id(source, '#', date)}",
        text=text,
        speaker="Menteri Perhubungan (Dudy Purwagandhi)",
        date=date,
        context=source,
        link="#",
    )


def test_news_collapses_on_title_and_time():
    records = [make_news("Menhub hadir", "Antara"), make_news("Menhub hadir", "Kompas")]
    assert len(dedupe(records, news_key)) == 1


def test_survivor_does_not_depend_on_arrival_order():
    records = [
        make_news("Menhub hadir", "Antara"),
        make_news("Menhub hadir", "Kompas"),
        make_news("Menhub hadir", "Tempo"),
    ]
    forward = dedupe(records, news_key)
    backward = dedupe(list(reversed(records)), news_key)
    assert forward == backward


def test_same_title_different_time_is_kept():
    records = [
        make_news("Menhub hadir", "Antara"),
        make_news("Menhub hadir", "Antara", T0 + timedelta(hours=1)),
    ]
    assert len(dedupe(records, news_key)) == 2


def test_result_is_newest_first():
    records = [
        make_news("Lama", "Antara", T0 - timedelta(days=2)),
        make_news("Baru", "Antara", T0),
        make_news("Tengah", "Antara", T0 - timedelta(days=1)),
    ]
    assert [r.title for r in dedupe(records, news_key)] == ["Baru", "Tengah", "Lama"]


def test_duplicate_ids_collapse_even_with_different_keys():
    first = make_news("Judul satu", "Antara")
    second = first.model_copy(update={"title": "Judul dua"})
    assert len(dedupe([first, second], news_key)) == 1


def test_quotes_collapse_on_text_and_date():
    quotes = [
        make_quote("Kami siap bekerja", "Antara"),
        make_quote("Kami siap bekerja", "Kompas"),
        make_quote("Kami siap bekerja", "Tempo", T0 + timedelta(days=1)),
    ]
    assert len(dedupe(quotes, quote_key)) == 2


def test_event_key_uses_event_date():
    event = EventRecord(
        id="ev-1",
        title="Peresmian terminal",
        date=T0,
        location="Makassar",
        attended_by_minister=True,
        source="Antara",
        link="#",
    )
    assert event_key(event) == "Peresmian terminal|2025-03-10T08:00:00.000Z"
