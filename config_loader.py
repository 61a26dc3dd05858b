"""YAML config loader with override support.

Every word list the pipeline matches against lives here, so components can be
built with a synthetic vocabulary in tests.
"""
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ValidationError


DEFAULT_CONFIG_PATH = Path(__file__).parent / "config" / "config.yaml"


class ConfigError(Exception):
    """Configuration file could not be parsed or validated."""


class FeedSource(BaseModel):
    """Single feed source."""
    name: str
    url: str


class EntityRule(BaseModel):
    """Keyword -> tag mapping used by the entity tagger."""
    keyword: str
    tag: str


class VocabularyConfig(BaseModel):
    """Word lists for the Indonesian-language heuristics."""
    ministry_aliases: list[str] = Field(default_factory=lambda: [
        "menhub", "menteri perhubungan", "kemenhub",
        "kementerian perhubungan", "dudy purwagandhi", "purwagandhi",
    ])
    # Relevance gate; the caller may override per request
    relevance_keywords: list[str] = Field(default_factory=lambda: [
        "menhub", "menteri perhubungan", "kemenhub",
        "kementerian perhubungan", "dudy purwagandhi", "purwagandhi",
    ])
    domain_keywords: list[str] = Field(default_factory=lambda: [
        "transportasi", "penerbangan", "bandara", "pelabuhan", "pelayaran",
        "kereta", "krl", "lrt", "mrt", "jalan tol", "terminal", "angkot",
        "bus listrik", "emisi", "elektrifikasi", "keselamatan", "regulasi",
    ])
    speech_verbs: list[str] = Field(default_factory=lambda: [
        "kata", "mengatakan", "ujar", "tutur", "jelas", "menjelaskan",
        "sebut", "menyebut", "imbuh", "tegas", "menegaskan", "ungkap",
        "mengungkap", "papar", "menyampaikan", "lanjut", "menambahkan",
    ])
    event_terms: list[str] = Field(default_factory=lambda: [
        "peresmian", "meresmikan", "resmikan", "groundbreaking",
        "kunjungan kerja", "meninjau", "tinjau", "rapat koordinasi", "rapat",
        "rakor", "dialog", "seminar", "forum", "penandatanganan",
        "kick off", "kick-off", "uji coba", "pelepasan",
    ])
    future_markers: list[str] = Field(default_factory=lambda: ["akan", "besok"])
    month_names: list[str] = Field(default_factory=lambda: [
        "januari", "februari", "maret", "april", "mei", "juni", "juli",
        "agustus", "september", "oktober", "november", "desember",
    ])
    location_prepositions: list[str] = Field(default_factory=lambda: ["di"])
    boilerplate_markers: list[str] = Field(default_factory=lambda: [
        "baca juga", "lihat juga", "foto:",
    ])
    entity_rules: list[EntityRule] = Field(default_factory=lambda: [
        EntityRule(keyword=k, tag=t) for k, t in [
            ("menhub", "Menteri Perhubungan"),
            ("menteri perhubungan", "Menteri Perhubungan"),
            ("dudy purwagandhi", "Menteri Perhubungan"),
            ("purwagandhi", "Menteri Perhubungan"),
            ("kemenhub", "Kemenhub"),
            ("kementerian perhubungan", "Kemenhub"),
            ("bandara", "Penerbangan"),
            ("penerbangan", "Penerbangan"),
            ("pelabuhan", "Laut"),
            ("pelayaran", "Laut"),
            ("kapal", "Laut"),
            ("kereta", "Kereta"),
            ("krl", "Kereta"),
            ("lrt", "Kereta"),
            ("mrt", "Kereta"),
            ("jalan tol", "Darat"),
            ("terminal", "Darat"),
            ("angkot", "Darat"),
            ("bus listrik", "Transportasi Hijau"),
            ("elektrifikasi", "Transportasi Hijau"),
            ("emisi", "Transportasi Hijau"),
            ("keselamatan", "Keselamatan"),
            ("regulasi", "Regulasi"),
        ]
    ])


class ScoringWeights(BaseModel):
    """Quote candidate signal weights."""
    direct_quotes: int = 4
    mentions_ministry: int = 3
    speech_verb: int = 2
    good_length: int = 2
    contentful: int = 1


class QuoteConfig(BaseModel):
    """Quotation extraction bands and caps."""
    fragment_min_chars: int = 8
    fragment_max_chars: int = 400
    attributed_min_chars: int = 30
    ideal_min_chars: int = 40
    ideal_max_chars: int = 220
    max_chars: int = 280
    truncate_to: int = 277
    ellipsis: str = "…"
    speaker: str = "Menteri Perhubungan (Dudy Purwagandhi)"
    tag: str = "Kutipan"
    weights: ScoringWeights = Field(default_factory=ScoringWeights)


class NormalizeConfig(BaseModel):
    """Text normalizer flags."""
    decode_entities: bool = True
    canonicalize_quotes: bool = True


class AggregationConfig(BaseModel):
    """Aggregation window and output limits."""
    window_days: int = 7
    max_items: int = 120
    summary_max_chars: int = 500
    link_placeholder: str = "#"
    location_placeholder: str = "—"
    # Domain keywords also pass the relevance gate when enabled
    gate_on_domain_keywords: bool = False


class HttpConfig(BaseModel):
    """Feed fetching settings."""
    timeout: int = 15
    retries: int = 3
    max_concurrent: int = 10


class CaptionConfig(BaseModel):
    """Social caption drafting."""
    prefix: str = "Menhub"
    hashtags: list[str] = Field(default_factory=lambda: ["#Kemenhub", "#Transportasi"])
    fallback_title: str = "Pembaruan"


class AppConfig(BaseModel):
    """Complete application configuration."""
    feeds: list[FeedSource] = Field(default_factory=lambda: [
        FeedSource(name="Antara", url="https://www.antaranews.com/rss/terkini"),
        FeedSource(name="Kompas", url="https://rss.kompas.com/"),
        FeedSource(name="Tempo", url="https://www.tempo.co/rss/nasional"),
    ])
    vocabulary: VocabularyConfig = Field(default_factory=VocabularyConfig)
    quotes: QuoteConfig = Field(default_factory=QuoteConfig)
    normalize: NormalizeConfig = Field(default_factory=NormalizeConfig)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    caption: CaptionConfig = Field(default_factory=CaptionConfig)


class ConfigLoader:
    """Load configuration from YAML with overrides."""

    def __init__(self, config_path: Path = None):
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: Optional[AppConfig] = None
        self._overrides: Dict[str, Any] = {}

    def load(self) -> AppConfig:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            self._config = AppConfig()
            self._apply_overrides()
            return self._config

        with open(self.config_path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"{self.config_path}: {e}") from e

        try:
            self._config = AppConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"{self.config_path}: {e}") from e

        self._apply_overrides()
        return self._config

    def set_overrides(self, overrides: Dict[str, Any]) -> None:
        """Set overrides to apply on top of YAML config."""
        self._overrides = overrides
        if self._config:
            self._apply_overrides()

    def _apply_overrides(self) -> None:
        if not self._config or not self._overrides:
            return

        for key, value in self._overrides.items():
            self._set_nested(key, value)

    def _set_nested(self, key: str, value: Any) -> None:
        """Set a nested config value using dot notation."""
        parts = key.split(".")
        obj = self._config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return

        final_key = parts[-1]
        if not hasattr(obj, final_key):
            return

        current = getattr(obj, final_key)
        # bool before int: bool is an int subclass
        if isinstance(current, bool):
            value = str(value).lower() in ("true", "1", "yes")
        elif isinstance(current, int):
            value = int(value)
        elif isinstance(current, list) and isinstance(value, str):
            value = [v.strip() for v in value.split(",") if v.strip()]
        setattr(obj, final_key, value)

    def reload(self) -> AppConfig:
        """Reload configuration from file."""
        return self.load()

    @property
    def config(self) -> AppConfig:
        """Get current config, loading if necessary."""
        if self._config is None:
            self.load()
        return self._config


# Global config loader instance
_loader: Optional[ConfigLoader] = None


def get_config_loader(config_path: Path = None) -> ConfigLoader:
    """Get global config loader instance."""
    global _loader
    if _loader is None:
        _loader = ConfigLoader(config_path)
    return _loader


def get_config() -> AppConfig:
    """Get current application config."""
    return get_config_loader().config
