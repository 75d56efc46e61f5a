import json
from pathlib import Path

import pytest

from opencode_sync.document import ReadError, dump_document, load_document, write_document


def test_missing_file_loads_as_none(tmp_path: Path) -> None:
    assert load_document(tmp_path / "opencode.json") is None


def test_malformed_json_is_a_read_error(tmp_path: Path) -> None:
    file = tmp_path / "opencode.json"
    file.write_text('{\n  // comment\n  "provider": {}\n}', encoding="utf-8")

    with pytest.raises(ReadError):
        load_document(file)


def test_wrong_provider_shape_is_a_read_error(tmp_path: Path) -> None:
    file = tmp_path / "opencode.json"
    file.write_text('{"provider": {"local": {"models": {"m": {"tools": "yes"}}}}}', encoding="utf-8")

    with pytest.raises(ReadError):
        load_document(file)


def test_unknown_keys_survive_a_round_trip(tmp_path: Path) -> None:
    original = {
        "$schema": "https://opencode.ai/config.json",
        "provider": {
            "local": {
                "npm": "@ai-sdk/openai-compatible",
                "name": "Local",
                "options": {"baseURL": "http://localhost:1234/v1", "timeout": 30},
                "models": {"llama3": {"name": "Llama 3", "limit": {"context": 8192}}},
            }
        },
        "theme": "opencode",
    }
    file = tmp_path / "opencode.json"
    file.write_text(json.dumps(original, indent=2) + "\n", encoding="utf-8")

    document = load_document(file)

    assert document is not None
    assert json.loads(dump_document(document)) == original


def test_write_creates_directories_and_formats(tmp_path: Path) -> None:
    file = tmp_path / "nested" / "opencode" / "opencode.json"
    source = tmp_path / "source.json"
    source.write_text('{"$schema": "x", "provider": {}}', encoding="utf-8")
    document = load_document(source)

    write_document(file, document)

    text = file.read_text(encoding="utf-8")
    assert text == '{\n  "$schema": "x",\n  "provider": {}\n}\n'


def test_invalid_utf8_is_a_read_error(tmp_path: Path) -> None:
    file = tmp_path / "opencode.json"
    file.write_bytes(b'{"provider": {}, "theme": "\xff\xfe"}')

    with pytest.raises(ReadError, match="not valid UTF-8"):
        load_document(file)


def test_null_provider_entries_are_kept(tmp_path: Path) -> None:
    file = tmp_path / "opencode.json"
    file.write_text('{"provider": {"other": null, "local": {}}}', encoding="utf-8")

    document = load_document(file)

    assert document is not None
    assert document.provider["other"] is None
    assert json.loads(dump_document(document)) == {"provider": {"other": None, "local": {}}}


def test_key_order_of_provider_and_model_maps_is_kept(tmp_path: Path) -> None:
    file = tmp_path / "opencode.json"
    file.write_text(
        '{"provider": {"zeta": {"models": {"b": {}, "a": {}}}, "alpha": {}}}',
        encoding="utf-8",
    )

    document = load_document(file)
    saved = json.loads(dump_document(document))

    assert list(saved["provider"]) == ["zeta", "alpha"]
    assert list(saved["provider"]["zeta"]["models"]) == ["b", "a"]
