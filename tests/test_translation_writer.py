from quran_datasets.models import TranslationInfo, Verse
from quran_datasets.translation_writer import build_document, enrich_rows, write_translation

from conftest import api_verse, catalog_entry


def verses(*pairs):
    return [Verse.model_validate(api_verse(surah, ayah)) for surah, ayah in pairs]


def test_catalog_entry_keeps_unknown_fields():
    entry = {**catalog_entry("t1"), "extra_field": "kept"}
    info = TranslationInfo.model_validate(entry)
    assert info.language_code == "en"
    assert info.metadata() == entry


def test_build_document_groups_by_surah():
    info = TranslationInfo.model_validate(catalog_entry("t1"))
    rows = [v.row() for v in verses((1, 1), (1, 2), (2, 1))]
    document = build_document(info, rows).to_json_dict()
    assert list(document["surahs"]) == ["1", "2"]
    assert [a["ayah"] for a in document["surahs"]["1"]] == [1, 2]
    assert document["translation_version"] == "1.0"


def test_enrich_rows_adds_translation_columns():
    info = TranslationInfo.model_validate(catalog_entry("t1", language="ur", version="2.0"))
    row = enrich_rows(info, [v.row() for v in verses((3, 4))])[0]
    assert row["translation_key"] == "t1"
    assert row["language_code"] == "ur"
    assert row["translation_version"] == "2.0"
    assert (row["surah"], row["ayah"]) == (3, 4)


def test_no_verses_writes_nothing(tmp_path):
    info = TranslationInfo.model_validate(catalog_entry("t1"))
    assert write_translation(tmp_path, info, []) is None
    assert list(tmp_path.iterdir()) == []


def test_unsafe_catalog_values_stay_in_one_directory(tmp_path):
    info = TranslationInfo.model_validate(catalog_entry("odd/key"))
    output = write_translation(tmp_path, info, verses((1, 1)))
    assert output.ayah_count == 1
    assert (tmp_path / "en" / "odd-key" / "surah_001.csv").exists()
