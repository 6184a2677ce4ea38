"""Base classes for content item repositories."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from pydantic import BaseModel, ConfigDict, Field

from mailcraft.models import MediaItem, MessageItem


class DBConfig(BaseModel):
    """Base configuration shared by all database backends."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(alias="TYPE")


class DB(ABC):
    """Repository of versioned content items.

    Items are addressed by id and language. A message exists in every language
    it has a version for; media items are looked up the same way.
    """

    db_name: str = "DB"
    module_name: str = "db"

    @abstractmethod
    def get_message(self, message_id: str, lang: str) -> MessageItem | None:
        """Return one language version of a message, or None if it does not exist."""

    @abstractmethod
    def get_media_item(self, media_id: str, lang: str) -> MediaItem | None:
        """Return one language version of a media item, or None if it does not exist."""

    @abstractmethod
    def get_message_languages(self, message_id: str) -> list[str]:
        """Return the languages the message has versions in."""

    @abstractmethod
    def save_message(self, message: MessageItem) -> None:
        """Persist the attachment list of a message version."""

    @abstractmethod
    def edit_media_item(self, media: MediaItem) -> AbstractContextManager[MediaItem]:
        """Open a scoped edit of a media item.

        The context yields an editable copy. Its fields are written back only when
        the block exits without an exception, all of them at once.
        """

    @abstractmethod
    def health_check(self) -> None:
        """Raise an exception if the database is not usable."""
