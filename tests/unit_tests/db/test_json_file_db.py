import json
from pathlib import Path

import pytest

from mailcraft.db.json_file_db import JsonFile, JsonFileDbConfig, db_from_config, get_db
from tests.unit_tests.fake_app import sample_data


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "content.json"
    path.write_text(json.dumps(sample_data()))
    return path


def read(path: Path) -> dict:
    return json.loads(path.read_text())


def test_get_db(data_file: Path):
    db = get_db({"TYPE": "json_file", "PATH": str(data_file)})

    assert isinstance(db, JsonFile)
    assert db.db_name == "JsonFileDb"
    assert db.get_message_languages("newsletter") == ["en", "de", "fr"]


def test_db_from_config(data_file: Path):
    db = db_from_config(JsonFileDbConfig(TYPE="json_file", PATH=str(data_file)))

    assert db.get_message("newsletter", "en") is not None


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        JsonFile(str(tmp_path / "missing.json"))


def test_save_message_writes_file(data_file: Path):
    db = JsonFile(str(data_file))
    message = db.get_message("newsletter", "de")
    brochure = db.get_media_item("brochure", "de")
    assert message is not None and brochure is not None

    message.attachments.append(brochure)
    db.save_message(message)

    assert read(data_file)["messages"][1]["attachments"] == ["brochure"]


def test_edit_media_item_writes_file(data_file: Path):
    db = JsonFile(str(data_file))
    media = db.get_media_item("brochure", "en")
    assert media is not None

    with db.edit_media_item(media) as edited:
        edited.title = "brochure.pdf"

    stored = next(
        record
        for record in read(data_file)["media"]
        if record["id"] == "brochure" and record["language"] == "en"
    )
    assert stored["title"] == "brochure.pdf"


def test_failed_edit_does_not_write_file(data_file: Path):
    db = JsonFile(str(data_file))
    media = db.get_media_item("brochure", "en")
    assert media is not None
    before = data_file.read_text()

    with pytest.raises(RuntimeError):
        with db.edit_media_item(media) as edited:
            edited.title = "brochure.pdf"
            raise RuntimeError("interrupted")

    assert data_file.read_text() == before
