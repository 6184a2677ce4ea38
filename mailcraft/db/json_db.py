"""In-memory JSON database implementation."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import Field

from mailcraft.db.db import DB, DBConfig
from mailcraft.models import MediaItem, MessageItem

logger = logging.getLogger(__name__)

# Fields a scoped media edit is allowed to write back
EDITABLE_MEDIA_FIELDS = frozenset({"name", "display_name", "title"})


def db_config_type():
    """Return the configuration class for JSON database."""
    return JsonDbConfig


class JsonDbConfig(DBConfig):
    """Configuration for in-memory JSON database."""

    data: dict[str, Any] = Field(alias="DATA")


def get_db(config):
    """Get a JSON database instance from raw configuration."""
    json_db_config = JsonDbConfig.model_validate(config)
    return Json(json_db_config.data)


def db_from_config(config: JsonDbConfig):
    """Create a JSON database instance from configuration."""
    return Json(config.data)


class Json(DB):
    """In-memory JSON database implementation.

    Expected layout::

        {
            "messages": [{"id": ..., "language": ..., "state": ..., "attachments": [media ids]}],
            "media": [{"id": ..., "language": ..., "name": ..., "size": ...}],
        }
    """

    def __init__(self, data: dict[str, Any]):
        """Initialize JSON database with data dictionary."""
        super().__init__()
        self.data: dict[str, Any] = data
        self.module_name = "json_db"
        self.db_name = "JsonDb"

    def _get_records(self, collection: str) -> list[dict[str, Any]]:
        records = self.data.get(collection, [])
        if not isinstance(records, list):
            raise Exception(f"Collection {collection} should be a list")
        return records

    def _find_record(self, collection: str, item_id: str, lang: str) -> dict[str, Any] | None:
        return next(
            (
                record
                for record in self._get_records(collection)
                if record["id"] == item_id and record["language"] == lang
            ),
            None,
        )

    def get_message(self, message_id: str, lang: str) -> MessageItem | None:
        """Retrieve one language version of a message with its attachments resolved."""
        record = self._find_record("messages", message_id, lang)
        if record is None:
            return None

        attachments = []
        for media_id in record.get("attachments", []):
            media = self.get_media_item(media_id, lang)
            if media is None:
                logger.warning(
                    "Message %s (%s) references missing media item %s", message_id, lang, media_id
                )
                continue
            attachments.append(media)

        return MessageItem.model_validate({**record, "attachments": attachments})

    def get_media_item(self, media_id: str, lang: str) -> MediaItem | None:
        """Retrieve one language version of a media item."""
        record = self._find_record("media", media_id, lang)
        if record is None:
            return None
        return MediaItem.model_validate(record)

    def get_message_languages(self, message_id: str) -> list[str]:
        """Retrieve languages of all versions of a message, in storage order."""
        languages: list[str] = []
        for record in self._get_records("messages"):
            if record["id"] == message_id and record["language"] not in languages:
                languages.append(record["language"])
        return languages

    def save_message(self, message: MessageItem) -> None:
        """Write the attachment list of a message version back to storage.

        Stored ids that get_message could not resolve in this language are not
        part of message.attachments; they keep their place in the stored list.
        """
        record = self._find_record("messages", message.id, message.language)
        if record is None:
            raise ValueError(f"Message {message.id} ({message.language}) not found")

        attachment_ids = [attachment.id for attachment in message.attachments]
        merged_ids: list[str] = []
        for media_id in record.get("attachments", []):
            unresolved = self.get_media_item(media_id, message.language) is None
            if unresolved or media_id in attachment_ids:
                merged_ids.append(media_id)
        merged_ids.extend(media_id for media_id in attachment_ids if media_id not in merged_ids)
        record["attachments"] = merged_ids

    @contextmanager
    def edit_media_item(self, media: MediaItem) -> Iterator[MediaItem]:
        """Edit a media item; changes are committed together when the block succeeds."""
        record = self._find_record("media", media.id, media.language)
        if record is None:
            raise ValueError(f"Media item {media.id} ({media.language}) not found")

        edited = media.model_copy()
        yield edited
        record.update(edited.model_dump(include=EDITABLE_MEDIA_FIELDS))

    def health_check(self) -> None:
        """Perform a health check on the JSON database.

        Raises an exception if the database is not accessible.
        """
        self._get_records("messages")
        self._get_records("media")
