"""Exceptions raised by the AAC board model.

Navigation and selection problems raise one of these; load/save problems
are logged and reported through ``BoardFileReport`` unless a caller asks
for strict behaviour, in which case ``BoardIOError`` is raised.
"""


class AACError(Exception):
    """Base class for every board error."""


class NullKeyError(AACError, ValueError):
    """An insert was attempted without an identifier."""


class NotFoundError(AACError, LookupError):
    """A lookup missed."""


class ItemNotFoundError(NotFoundError):
    """The image identifier is not in the category being searched."""


class AlreadyActiveError(AACError):
    """The category being selected is already the active one."""


class NoCategoriesAvailableError(AACError):
    """The board has no categories at all."""


class NoActiveCategoryError(AACError):
    """An item was requested while no category is active."""


class MissingActiveCategoryError(NoActiveCategoryError, NotFoundError):
    """The active identifier does not name a registered category."""


class BoardIOError(AACError, OSError):
    """Reading or writing a board file failed (strict mode only)."""
