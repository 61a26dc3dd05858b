"""Text processing utilities: markup stripping, normalization, sentence splitting."""
import re
import warnings
from typing import List, Optional
from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

# Feed bodies are often plain text or a bare URL
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)


# Entities that survive one round of HTML parsing in double-encoded feeds
ENTITY_REPLACEMENTS = [
    ("&amp;", "&"),
    ("&nbsp;", " "),
    ("&#160;", " "),
    ("&quot;", '"'),
    ("&#34;", '"'),
    ("&#39;", "'"),
    ("&apos;", "'"),
]

QUOTE_TRANSLATION = str.maketrans({
    "„": "“",
    "‟": "“",
    "«": "“",
    "〝": "“",
    "»": "”",
    "〞": "”",
    "＂": '"',
    "″": '"',
    "‘": "'",
    "’": "'",
    "‚": "'",
    "‛": "'",
})

_SCRIPT_RE = re.compile(r"<(script|style|noscript)\b[\s\S]*?</\1\s*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
_TAG_START_RE = re.compile(r"<[A-Za-z/!]")
_ANGLE_RE = re.compile(r"[<>]")
_WS_RE = re.compile(r"\s+")

# Sentence end, whitespace, then a capital letter or an opening quote
SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.?!])\s+(?=[A-ZÂ-Ź“\"])")


def normalize_whitespace(text: Optional[str]) -> str:
    """Normalize all whitespace to single spaces."""
    if not text:
        return ""
    return _WS_RE.sub(" ", text).strip()


def strip_markup_simple(html: str) -> str:
    """Regex tag stripper, used when the HTML parser gives up."""
    text = _SCRIPT_RE.sub(" ", html)
    return _TAG_RE.sub(" ", text)


def clean_html(html: Optional[str]) -> str:
    """
    Remove script/style blocks and all HTML tags.

    Args:
        html: Raw HTML or plain text

    Returns:
        Text with elements replaced by spaces (whitespace not yet collapsed)
    """
    if not html:
        return ""

    if "<" not in html and "&" not in html:
        return html

    try:
        soup = BeautifulSoup(html, "html.parser")
        for element in soup(["script", "style", "noscript"]):
            element.decompose()
        return soup.get_text(separator=" ")
    except Exception:
        return strip_markup_simple(html)


def decode_entities(text: str) -> str:
    """Decode the fixed set of common entities."""
    for entity, replacement in ENTITY_REPLACEMENTS:
        text = text.replace(entity, replacement)
    return text


def canonicalize_quotes(text: str) -> str:
    """Map quotation-mark variants onto “ ” and the straight quotes."""
    return text.translate(QUOTE_TRANSLATION)


def normalize_text(
    raw: Optional[str],
    decode: bool = True,
    canonical_quotes: bool = True
) -> str:
    """
    Turn a raw feed fragment into one clean line of text.

    Entity decoding runs before quote canonicalization so that `&quot;`
    ends up as a straight quote. Never raises.

    Args:
        raw: HTML or plain text, may be None
        decode: Decode the fixed entity set
        canonical_quotes: Canonicalize quotation marks

    Returns:
        Markup-free, whitespace-collapsed text
    """
    if not raw:
        return ""

    text = clean_html(str(raw))
    if decode:
        text = decode_entities(text)
    if canonical_quotes:
        text = canonicalize_quotes(text)

    # Entity decoding can resurrect a tag
    if _TAG_START_RE.search(text):
        text = strip_markup_simple(text)
    text = _ANGLE_RE.sub(" ", text)
    return normalize_whitespace(text)


def segment_sentences(text: Optional[str]) -> List[str]:
    """
    Split normalized text into sentences.

    Tuned for Indonesian news copy: a boundary needs a capital letter or an
    opening quote after the punctuation, so decimals ("2.5 juta") and most
    lower-case abbreviations stay intact. Over-splits on "Dr. Budi".

    Returns:
        Sentences joined by single spaces reproduce the input; never empty
    """
    normalized = normalize_whitespace(text)
    parts = [p.strip() for p in SENTENCE_BOUNDARY_RE.split(normalized)]
    parts = [p for p in parts if p]
    return parts if parts else [normalized]


def truncate_text(text: str, max_length: int = 500, marker: str = "…") -> str:
    """Truncate text to max length, marker included."""
    if not text or len(text) <= max_length:
        return text or ""
    return text[:max_length - len(marker)] + marker
