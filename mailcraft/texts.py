"""Localizable texts shown to editors.

Message ids are the English texts. Positional placeholders ({0}, {1}, ...) are
filled in after translation so translators can reorder them.
"""

from flask_babel import gettext

EDITED_MESSAGE_NOT_FOUND = (
    "The edited message could not be found. "
    "It may have been moved or deleted by another user."
)
FILE_NOT_ATTACHED_STATE_CHANGED = (
    "The file {0} could not be attached. "
    "Another user may have changed the message state from draft or inactive."
)
FILE_NOT_ATTACHED = "The file {0} has not been attached."
TOTAL_ATTACHMENT_SIZE_EXCEEDED = (
    "The file {0} could not be attached. "
    "The total attachment size ({1}) exceeds the allowed size ({2})."
)
FILE_ATTACHED = "The file {0} has been attached to the message."
CLICK_HERE = "Click here"
COPY_ATTACHMENT_TO_ALL_LANGUAGES = (
    "to copy the newly added attachment {0} to all message language versions."
)
GENERAL_ERROR = (
    "Something went wrong. Please try again or contact your system administrator."
)
ACCESS_DENIED = "You do not have permission to perform this action."


def localize(key: str, *args: object) -> str:
    """Translate a text to the current locale and fill in its placeholders.

    Outside of a request the untranslated text is used.
    """
    text = gettext(key)
    if args:
        return text.format(*args)
    return text
