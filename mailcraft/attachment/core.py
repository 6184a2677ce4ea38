"""Attaching media library files to campaign messages."""

from __future__ import annotations

import datetime
import json
import logging
import ntpath
import os
from collections.abc import Callable
from dataclasses import dataclass, fields
from typing import Any, Protocol

import humanize
from opentelemetry import trace

from mailcraft import texts
from mailcraft.attachment.constants import (
    ADD_TO_ALL_LANGUAGES_TRIGGER,
    ATTACHMENT_NAME_PREFIX,
    ATTACHMENT_NAME_TIME_FORMAT,
    DEFAULT_ATTACHMENT_TOTAL_SIZE,
    ContractViolation,
)
from mailcraft.attachment.result import AttachResult, ErrorKind, FollowUpAction
from mailcraft.db.db import DB
from mailcraft.models import MediaItem, MessageItem

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

# Characters that may not appear in repository item names
INVALID_ITEM_NAME_CHARS = frozenset('\\/:?"<>|[]*')


class Localizer(Protocol):
    def __call__(self, key: str, *args: object) -> str: ...


def file_name_without_extension(file_name: str) -> str:
    """Return the base name of a file with path components and extension removed."""
    base_name = os.path.basename(ntpath.basename(file_name.rstrip("/\\")))
    stem, _ = os.path.splitext(base_name)
    return stem


def sanitize_item_name(name: str) -> str:
    """Make a name usable as a repository item name.

    Drops characters the repository rejects and collapses runs of whitespace.
    """
    kept = "".join(
        " " if ch.isspace() else ch
        for ch in name
        if ch not in INVALID_ITEM_NAME_CHARS and (ch.isprintable() or ch.isspace())
    )
    return " ".join(kept.split())


def generate_attachment_name(now: datetime.datetime) -> str:
    """Return a time-based item name for a newly attached media item."""
    return ATTACHMENT_NAME_PREFIX + now.strftime(ATTACHMENT_NAME_TIME_FORMAT)


def format_size(size: int) -> str:
    return humanize.naturalsize(size, binary=True)


@dataclass(frozen=True)
class AttachRequest:
    """Request to attach a media item to one language version of a message.

    Attributes:
        message_id: Id of the message to attach to.
        attachment_id: Id of the media item to attach.
        file_name: Original name of the uploaded file, including its extension.
        language: Language version of the message.

    Raises:
        ContractViolation: If any field is missing or empty.
    """

    message_id: str
    attachment_id: str
    file_name: str
    language: str

    def __post_init__(self) -> None:
        for request_field in fields(self):
            value = getattr(self, request_field.name)
            if not isinstance(value, str) or not value.strip():
                raise ContractViolation(request_field.name)

    @classmethod
    def from_payload(cls, payload: Any) -> AttachRequest:
        """Build a request from the JSON body sent by the authoring UI."""
        if not isinstance(payload, dict):
            raise ContractViolation("request", "Could not get the attach request from the payload")
        return cls(
            message_id=payload.get("messageId", ""),
            attachment_id=payload.get("attachmentId", ""),
            file_name=payload.get("fileName", ""),
            language=payload.get("language", ""),
        )


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class AttachmentAttacher:
    """Attaches media items to campaign messages.

    All business failures are reported through the returned AttachResult. Only a
    malformed request raises (ContractViolation).
    """

    def __init__(
        self,
        db: DB,
        total_size_limit: int = DEFAULT_ATTACHMENT_TOTAL_SIZE,
        localize: Localizer = texts.localize,
        clock: Callable[[], datetime.datetime] = _now,
    ) -> None:
        """Initialize the attacher.

        Args:
            db: Repository holding messages and media items.
            total_size_limit: Maximum total size of a message's attachments, in bytes.
            localize: Function translating a text id and filling in its arguments.
            clock: Source of the current time, used to name attached media items.
        """
        self.db = db
        self.total_size_limit = total_size_limit
        self._localize = localize
        self._clock = clock

    def attach(self, request: AttachRequest) -> AttachResult:
        """Attach the requested media item to the message.

        Raises:
            ContractViolation: If request is not a valid AttachRequest.
        """
        if not isinstance(request, AttachRequest):
            raise ContractViolation(
                "request", f"Expected an AttachRequest, got {type(request).__name__}"
            )

        with tracer.start_as_current_span("attach_file") as span:
            span.set_attribute("mailcraft.message_id", request.message_id)
            span.set_attribute("mailcraft.attachment_id", request.attachment_id)
            span.set_attribute("mailcraft.language", request.language)
            try:
                result = self._attach(request)
            except Exception:
                logger.exception(
                    "Attaching media item %s to message %s (%s) failed",
                    request.attachment_id,
                    request.message_id,
                    request.language,
                )
                result = self._failure(ErrorKind.UNEXPECTED_FAILURE, texts.GENERAL_ERROR)
            span.set_attribute("mailcraft.attached", result.succeeded)
            return result

    def _attach(self, request: AttachRequest) -> AttachResult:
        message = self.db.get_message(request.message_id, request.language)
        if message is None:
            logger.warning(
                "Message %s (%s) not found, cannot attach %s",
                request.message_id,
                request.language,
                request.file_name,
            )
            return self._failure(ErrorKind.NOT_FOUND, texts.EDITED_MESSAGE_NOT_FOUND)

        if not message.is_editable:
            logger.warning(
                "Message %s (%s) is %s, cannot attach %s",
                message.id,
                message.language,
                message.state.value,
                request.file_name,
            )
            return self._failure(
                ErrorKind.STATE_CONFLICT,
                texts.FILE_NOT_ATTACHED_STATE_CHANGED,
                request.file_name,
            )

        media = self.db.get_media_item(request.attachment_id, request.language)
        if media is None:
            logger.warning(
                "Media item %s (%s) not found", request.attachment_id, request.language
            )
            return self._failure(ErrorKind.NOT_FOUND, texts.FILE_NOT_ATTACHED, request.file_name)

        total_size = message.total_attachment_size + media.size
        if total_size > self.total_size_limit:
            logger.warning(
                "Attaching %s to message %s would exceed the size limit (%d > %d bytes)",
                request.file_name,
                message.id,
                total_size,
                self.total_size_limit,
            )
            return self._failure(
                ErrorKind.QUOTA_EXCEEDED,
                texts.TOTAL_ATTACHMENT_SIZE_EXCEEDED,
                request.file_name,
                format_size(total_size),
                format_size(self.total_size_limit),
            )

        message.attachments.append(media)
        self.db.save_message(message)

        with self.db.edit_media_item(media) as edited:
            edited.name = generate_attachment_name(self._clock())
            edited.display_name = sanitize_item_name(
                file_name_without_extension(request.file_name)
            )
            edited.title = request.file_name

        logger.info(
            "Attached media item %s to message %s (%s)", media.id, message.id, message.language
        )

        follow_up_action = None
        try:
            if self.should_propose_copy_to_all_languages(
                message, request.language, request.file_name
            ):
                follow_up_action = self._copy_to_all_languages_action(request)
        except Exception:
            # The file is attached at this point; only the suggestion is lost
            logger.exception(
                "Could not check other language versions of message %s", message.id
            )

        return AttachResult.success(
            self._localize(texts.FILE_ATTACHED, request.file_name), follow_up_action
        )

    def should_propose_copy_to_all_languages(
        self, message: MessageItem, context_language: str, file_name: str
    ) -> bool:
        """Decide whether to offer copying a new attachment to the other languages.

        The offer is made only when the message has other language versions and
        none of them has an attachment displayed under file_name yet.
        """
        other_languages = [
            language
            for language in self.db.get_message_languages(message.id)
            if language != context_language
        ]
        if not other_languages:
            return False

        for language in other_languages:
            attachments = self.attachments_in_language(message.id, language)
            if any(attachment.display_name == file_name for attachment in attachments):
                return False

        return True

    def attachments_in_language(self, message_id: str, language: str) -> list[MediaItem]:
        """Return the attachments of one language version, empty if it does not exist."""
        localized_message = self.db.get_message(message_id, language)
        if localized_message is None:
            return []
        return list(localized_message.attachments)

    def _copy_to_all_languages_action(self, request: AttachRequest) -> FollowUpAction:
        arguments = json.dumps(
            {"attachmentId": request.attachment_id, "fileName": request.file_name},
            separators=(", ", ":"),
        )
        return FollowUpAction(
            action_link=f"{ADD_TO_ALL_LANGUAGES_TRIGGER}({arguments})",
            action_text=self._localize(texts.CLICK_HERE),
            message=self._localize(texts.COPY_ATTACHMENT_TO_ALL_LANGUAGES, request.file_name),
        )

    def _failure(self, error_kind: ErrorKind, key: str, *args: object) -> AttachResult:
        return AttachResult.failure(error_kind, self._localize(key, *args))
