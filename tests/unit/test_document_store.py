import json
import os
from unittest.mock import patch

import pytest

from src.document_store import (
    LocaleSyncError,
    MalformedDocumentError,
    MissingLocaleDocumentError,
    MissingReferenceDocumentError,
    PersistFailureError,
    UnreadableDocumentError,
    list_locale_files,
    load_document,
    resolve_locale_file,
    serialize_document,
    write_document
)


def test_load_document_returns_tree(tmp_path):
    path = tmp_path / "de.json"
    path.write_text('{"a": {"b": "Ä"}, "list": [1, 2]}', encoding="utf-8")

    assert load_document(str(path)) == {"a": {"b": "Ä"}, "list": [1, 2]}


def test_load_document_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"a": ', encoding="utf-8")

    with pytest.raises(MalformedDocumentError) as exc_info:
        load_document(str(path))

    assert exc_info.value.path == str(path)
    assert "broken.json" in str(exc_info.value)


def test_load_document_top_level_must_be_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text('["not", "a", "mapping"]', encoding="utf-8")

    with pytest.raises(MalformedDocumentError):
        load_document(str(path))


def test_load_document_not_utf8(tmp_path):
    path = tmp_path / "latin.json"
    path.write_bytes('{"a": "verf\xfcgbar"}'.encode("latin-1"))

    with pytest.raises(MalformedDocumentError) as exc_info:
        load_document(str(path))

    assert "UTF-8" in str(exc_info.value)


def test_load_document_unreadable_file(tmp_path):
    path = tmp_path / "de.json"
    path.write_text('{"a": "b"}', encoding="utf-8")

    with patch("src.document_store.open", side_effect=PermissionError(13, "Permission denied"), create=True):
        with pytest.raises(UnreadableDocumentError) as exc_info:
            load_document(str(path))

    assert isinstance(exc_info.value, LocaleSyncError)
    assert exc_info.value.path == str(path)
    assert str(exc_info.value) == f"Could not read '{path}': Permission denied"


def test_load_document_directory_is_unreadable(tmp_path):
    path = tmp_path / "fr.json"
    path.mkdir()

    with pytest.raises(UnreadableDocumentError) as exc_info:
        load_document(str(path))

    assert "fr.json" in str(exc_info.value)



def test_serialize_document_format():
    content = serialize_document({"b": {"c": "ü"}, "a": 1})

    assert content == '{\n  "b": {\n    "c": "ü"\n  },\n  "a": 1\n}\n'


def test_serialize_document_ensure_ascii():
    assert serialize_document({"a": "ü"}, indent=4, ensure_ascii=True) == '{\n    "a": "\\u00fc"\n}\n'


def test_write_document_replaces_file(tmp_path):
    path = tmp_path / "de.json"
    path.write_text('{"old": true}\n', encoding="utf-8")

    write_document(str(path), {"new": "wert"})

    assert json.loads(path.read_text(encoding="utf-8")) == {"new": "wert"}
    assert path.read_text(encoding="utf-8").endswith("}\n")
    assert sorted(os.listdir(tmp_path)) == ["de.json"]


def test_write_document_failure_keeps_original(tmp_path):
    path = tmp_path / "de.json"
    path.write_text('{"old": true}\n', encoding="utf-8")

    with patch("src.document_store.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(PersistFailureError) as exc_info:
            write_document(str(path), {"new": "wert"})

    assert "disk full" in str(exc_info.value)
    assert path.read_text(encoding="utf-8") == '{"old": true}\n'
    assert sorted(os.listdir(tmp_path)) == ["de.json"]


def test_list_locale_files_excludes_reference_and_other_files(tmp_path):
    for name in ["en.json", "fr.json", "de.json", "notes.txt"]:
        (tmp_path / name).write_text("{}", encoding="utf-8")
    (tmp_path / "nested.json").mkdir()

    assert list_locale_files(str(tmp_path), "en.json") == ["de.json", "fr.json"]


def test_resolve_locale_file():
    assert resolve_locale_file("de") == "de.json"
    assert resolve_locale_file("de.json") == "de.json"
    assert resolve_locale_file("pt-BR", ".yaml") == "pt-BR.yaml"


def test_error_hierarchy():
    for error in (
            MissingReferenceDocumentError("/x/en.json"),
            MissingLocaleDocumentError("/x/de.json"),
            MalformedDocumentError("/x/de.json", "bad"),
            PersistFailureError("/x/de.json", "bad"),
    ):
        assert isinstance(error, LocaleSyncError)
    assert str(MissingLocaleDocumentError("/x/de.json")) == "Locale file not found: de.json"
