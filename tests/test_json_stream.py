import json

import pytest

from quran_datasets.json_stream import (
    IN_ESCAPE,
    IN_STRING,
    OUTSIDE,
    JsonArrayWriter,
    JsonObjectScanner,
    JsonStreamError,
    read_json_array,
)

DOCUMENTS = [
    {
        "translation_key": "english_saheeh",
        "language_code": "en",
        "translation_title": "Braces {inside} a \"quoted\" title",
        "translation_version": "1.0",
        "surahs": {"1": [{"ayah": 1, "arabic_text": "بِسْمِ اللَّهِ الرَّحْمَٰنِ الرَّحِيمِ",
                          "translation": "In the name of Allah }{", "footnotes": "back\\slash \\\""}]},
    },
    {
        "translation_key": "urdu_junagarhi",
        "language_code": "ur",
        "translation_title": "}",
        "translation_version": None,
        "surahs": {"1": [], "2": [{"ayah": 1, "arabic_text": "الم", "translation": "الم", "footnotes": ""}]},
    },
    {
        "translation_key": "empty",
        "language_code": "fr",
        "translation_title": "",
        "translation_version": "2.1",
        "surahs": {},
    },
]


def write_documents(path, batches):
    writer = JsonArrayWriter(path)
    for i, batch in enumerate(batches):
        writer.write(batch, final=i == len(batches) - 1)
    return writer


def test_writer_produces_valid_json_across_flushes(tmp_path):
    path = tmp_path / "all.json"
    writer = write_documents(path, [DOCUMENTS[:1], DOCUMENTS[1:]])
    assert json.loads(path.read_text(encoding="utf-8")) == DOCUMENTS
    assert writer.closed and writer.count == 3


def test_writer_closes_array_when_final_batch_is_empty(tmp_path):
    path = tmp_path / "all.json"
    write_documents(path, [DOCUMENTS, []])
    assert json.loads(path.read_text(encoding="utf-8")) == DOCUMENTS


def test_writer_with_no_documents(tmp_path):
    path = tmp_path / "all.json"
    write_documents(path, [[]])
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_writer_refuses_writes_after_close(tmp_path):
    writer = write_documents(tmp_path / "all.json", [DOCUMENTS])
    with pytest.raises(JsonStreamError):
        writer.write(DOCUMENTS)


def test_unfinished_writer_leaves_array_open(tmp_path):
    path = tmp_path / "all.json"
    JsonArrayWriter(path).write(DOCUMENTS)
    with pytest.raises(json.JSONDecodeError):
        json.loads(path.read_text(encoding="utf-8"))


@pytest.mark.parametrize("chunk_size", [1, 2, 3, 5, 7, 64, 1024 * 1024])
def test_reader_matches_writer_for_any_chunk_size(tmp_path, chunk_size, capsys):
    path = tmp_path / "all.json"
    write_documents(path, [DOCUMENTS[:2], [], DOCUMENTS[2:]])
    assert list(read_json_array(path, chunk_size=chunk_size)) == DOCUMENTS
    assert "truncated" not in capsys.readouterr().out


def test_reader_is_lazy(tmp_path):
    path = tmp_path / "all.json"
    write_documents(path, [DOCUMENTS])
    stream = read_json_array(path, chunk_size=16)
    assert next(stream) == DOCUMENTS[0]
    assert next(stream) == DOCUMENTS[1]


def test_scanner_carries_partial_objects_between_pieces():
    scanner = JsonObjectScanner()
    assert scanner.feed('[\n{"a": "x{') == []
    assert scanner.state == IN_STRING
    assert scanner.feed('\\') == []
    assert scanner.state == IN_ESCAPE
    assert scanner.feed('"}", "b": {"c": 1}') == []
    assert scanner.feed('}') == ['{"a": "x{\\"}", "b": {"c": 1}}']
    assert scanner.state == OUTSIDE
    assert scanner.feed(',\n{"d": 2}\n]') == ['{"d": 2}']
    assert scanner.closed
    assert scanner.pending == 0


def test_malformed_object_is_skipped(tmp_path, capsys):
    path = tmp_path / "all.json"
    path.write_text('[{"a": 1},\n{"b": tru},\n{"c": 3}]', encoding="utf-8")
    assert list(read_json_array(path, chunk_size=4)) == [{"a": 1}, {"c": 3}]
    assert "Error parsing JSON object #2" in capsys.readouterr().out


def test_stray_characters_between_objects_are_reported(tmp_path, capsys):
    path = tmp_path / "all.json"
    path.write_text('[{"a": 1}, xx {"b": 2}]', encoding="utf-8")
    assert list(read_json_array(path, chunk_size=5)) == [{"a": 1}, {"b": 2}]
    assert "Ignored 2 unexpected characters" in capsys.readouterr().out


def test_truncated_file_yields_complete_objects_and_warns(tmp_path, capsys):
    path = tmp_path / "all.json"
    path.write_text('[\n{"a": 1},\n{"b": {"c": "unfinished', encoding="utf-8")
    assert list(read_json_array(path, chunk_size=8)) == [{"a": 1}]
    assert "looks truncated" in capsys.readouterr().out


def test_truncated_file_in_strict_mode_raises(tmp_path):
    path = tmp_path / "all.json"
    path.write_text('[\n{"a": 1},\n', encoding="utf-8")
    seen = []
    with pytest.raises(JsonStreamError):
        for obj in read_json_array(path, strict=True):
            seen.append(obj)
    assert seen == [{"a": 1}]
