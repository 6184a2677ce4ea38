from enum import Enum

from pydantic import BaseModel, Field


class MessageState(str, Enum):
    """Lifecycle state of a campaign message."""

    DRAFT = "draft"
    INACTIVE = "inactive"
    ACTIVATING = "activating"
    ACTIVE = "active"
    QUEUING = "queuing"
    SENDING = "sending"
    PAUSED = "paused"
    SENT = "sent"


# Structural edits, attachments included, are only allowed in these states
EDITABLE_STATES = frozenset({MessageState.DRAFT, MessageState.INACTIVE})


class MediaItem(BaseModel):
    """One language version of a file stored in the media library.

    Attributes:
        id: Identifier shared by all language versions of the item
        language: Language code of this version
        name: Item name, unique among its siblings in the repository
        display_name: Name shown to editors
        title: Title field, holds the original file name once attached
        size: Size of the stored file in bytes
    """

    id: str
    language: str
    name: str = ""
    display_name: str = ""
    title: str = ""
    size: int = Field(default=0, ge=0)


class MessageItem(BaseModel):
    """One language version of a campaign message.

    Attributes:
        id: Identifier shared by all language versions of the message
        language: Language code of this version
        state: Current lifecycle state
        attachments: Attached media items, in the order they were added
    """

    id: str
    language: str
    state: MessageState = MessageState.DRAFT
    attachments: list[MediaItem] = []

    @property
    def is_editable(self) -> bool:
        return self.state in EDITABLE_STATES

    @property
    def total_attachment_size(self) -> int:
        """Sum of the sizes of all attached files, in bytes."""
        return sum(attachment.size for attachment in self.attachments)
