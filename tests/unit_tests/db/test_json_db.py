import pytest

from mailcraft.db.db_loader import get_db, get_db_module
from mailcraft.db.json_db import Json, JsonDbConfig, db_from_config
from mailcraft.db.json_db import get_db as json_get_db
from mailcraft.models import MediaItem, MessageState
from tests.unit_tests.fake_app import sample_data


class TestJsonDbConfig:
    def test_model_validation(self):
        config = JsonDbConfig.model_validate({"TYPE": "json_db", "DATA": {"messages": []}})
        assert config.data == {"messages": []}


class TestFactoryFunctions:
    def test_get_db(self):
        db = json_get_db({"TYPE": "json_db", "DATA": {"test": "data"}})
        assert isinstance(db, Json)
        assert db.data == {"test": "data"}

    def test_db_from_config(self):
        config = JsonDbConfig(TYPE="json_db", DATA={"test": "data"})
        db = db_from_config(config)
        assert isinstance(db, Json)

    @pytest.mark.parametrize("db_type", ["json", "json_db", "JSON"])
    def test_loader_finds_module(self, db_type: str):
        assert get_db_module(db_type).__name__ == "mailcraft.db.json_db"

    def test_loader_rejects_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown database type: redis"):
            get_db_module("redis")

    def test_loader_get_db(self):
        db = get_db(JsonDbConfig(TYPE="json", DATA={"messages": []}))
        assert isinstance(db, Json)


class TestJsonDb:
    @pytest.fixture
    def db(self) -> Json:
        return Json(sample_data())

    def test_get_message(self, db: Json):
        message = db.get_message("newsletter", "en")

        assert message is not None
        assert message.id == "newsletter"
        assert message.language == "en"
        assert message.state is MessageState.DRAFT
        assert [attachment.id for attachment in message.attachments] == ["price-list"]
        assert message.attachments[0].size == 4000

    def test_get_message_in_other_language(self, db: Json):
        message = db.get_message("newsletter", "fr")

        assert message is not None
        assert message.state is MessageState.INACTIVE
        assert message.attachments == []

    def test_get_missing_message(self, db: Json):
        assert db.get_message("newsletter", "pl") is None
        assert db.get_message("nothing", "en") is None

    def test_message_skips_missing_media(self, db: Json, caplog: pytest.LogCaptureFixture):
        db.data["messages"][0]["attachments"].append("ghost")

        message = db.get_message("newsletter", "en")

        assert message is not None
        assert [attachment.id for attachment in message.attachments] == ["price-list"]
        assert "ghost" in caplog.text

    def test_get_media_item(self, db: Json):
        media = db.get_media_item("brochure", "de")

        assert media == MediaItem(id="brochure", language="de", name="brochure", size=3000)

    def test_get_missing_media_item(self, db: Json):
        assert db.get_media_item("brochure", "pl") is None

    def test_get_message_languages(self, db: Json):
        assert db.get_message_languages("newsletter") == ["en", "de", "fr"]
        assert db.get_message_languages("single-language") == ["en"]
        assert db.get_message_languages("nothing") == []

    def test_save_message(self, db: Json):
        message = db.get_message("newsletter", "de")
        assert message is not None
        brochure = db.get_media_item("brochure", "de")
        assert brochure is not None

        message.attachments.append(brochure)
        db.save_message(message)

        assert db.data["messages"][1]["attachments"] == ["brochure"]
        saved = db.get_message("newsletter", "de")
        assert saved is not None
        assert saved.attachments == [brochure]

    def test_save_message_keeps_ids_unresolved_in_language(self, db: Json):
        db.data["messages"][0]["attachments"] = ["price-list", "not-yet-translated"]
        message = db.get_message("newsletter", "en")
        brochure = db.get_media_item("brochure", "en")
        assert message is not None and brochure is not None
        assert [attachment.id for attachment in message.attachments] == ["price-list"]

        message.attachments.append(brochure)
        db.save_message(message)

        assert db.data["messages"][0]["attachments"] == [
            "price-list",
            "not-yet-translated",
            "brochure",
        ]

    def test_save_message_drops_removed_attachments(self, db: Json):
        message = db.get_message("newsletter", "en")
        assert message is not None

        message.attachments.clear()
        db.save_message(message)

        assert db.data["messages"][0]["attachments"] == []

    def test_save_missing_message(self, db: Json):
        message = db.get_message("newsletter", "en")
        assert message is not None
        db.data["messages"].pop(0)

        with pytest.raises(ValueError, match="not found"):
            db.save_message(message)

    def test_edit_media_item_commits_all_fields(self, db: Json):
        media = db.get_media_item("brochure", "en")
        assert media is not None

        with db.edit_media_item(media) as edited:
            edited.name = "attachment20260101T120000"
            edited.display_name = "brochure"
            edited.title = "brochure.pdf"

        updated = db.get_media_item("brochure", "en")
        assert updated == MediaItem(
            id="brochure",
            language="en",
            name="attachment20260101T120000",
            display_name="brochure",
            title="brochure.pdf",
            size=3000,
        )

    def test_edit_media_item_commits_nothing_on_error(self, db: Json):
        media = db.get_media_item("brochure", "en")
        assert media is not None

        with pytest.raises(RuntimeError):
            with db.edit_media_item(media) as edited:
                edited.name = "renamed"
                edited.display_name = "renamed"
                raise RuntimeError("interrupted")

        assert db.get_media_item("brochure", "en") == media

    def test_edit_media_item_does_not_change_size(self, db: Json):
        media = db.get_media_item("brochure", "en")
        assert media is not None

        with db.edit_media_item(media) as edited:
            edited.size = 1

        updated = db.get_media_item("brochure", "en")
        assert updated is not None
        assert updated.size == 3000

    def test_edit_missing_media_item(self, db: Json):
        with pytest.raises(ValueError, match="not found"):
            with db.edit_media_item(MediaItem(id="ghost", language="en")):
                pass

    def test_edit_leaves_other_languages(self, db: Json):
        media = db.get_media_item("brochure", "en")
        assert media is not None

        with db.edit_media_item(media) as edited:
            edited.title = "brochure.pdf"

        german = db.get_media_item("brochure", "de")
        assert german is not None
        assert german.title == ""

    def test_health_check(self, db: Json):
        db.health_check()

    def test_health_check_fails_on_malformed_data(self, db: Json):
        db.data["media"] = {"brochure": {}}

        with pytest.raises(Exception, match="should be a list"):
            db.health_check()
