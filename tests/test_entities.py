from config_loader import EntityRule, VocabularyConfig
from entities import EntityTagger


def default_tagger() -> EntityTagger:
    return EntityTagger(VocabularyConfig().entity_rules)


def test_tags_in_table_order_without_duplicates():
    tags = default_tagger().tag("Menhub meninjau pelabuhan dan kapal baru di bandara")
    assert tags == ["Menteri Perhubungan", "Penerbangan", "Laut"]


def test_tags_are_case_insensitive():
    assert default_tagger().tag("KEMENTERIAN PERHUBUNGAN uji coba KRL") == ["Kemenhub", "Kereta"]


def test_green_transport_and_regulation():
    tags = default_tagger().tag("Regulasi bus listrik untuk menekan emisi")
    assert tags == ["Transportasi Hijau", "Regulasi"]


def test_unmatched_text_yields_empty_list():
    assert default_tagger().tag("Harga cabai naik di pasar induk") == []
    assert default_tagger().tag("") == []


def test_synthetic_rules_skip_blank_entries():
    tagger = EntityTagger([
        EntityRule(keyword="port", tag="Sea"),
        EntityRule(keyword="shipping", tag="Sea"),
        EntityRule(keyword="", tag="Anything"),
        EntityRule(keyword="rail", tag=" "),
    ])
    assert tagger.tag("port and shipping and rail") == ["Sea"]
