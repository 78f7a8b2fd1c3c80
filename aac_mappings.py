"""Two-level mappings for an AAC board.

The first level is a set of categories; inside each category we store
images paired with the text to speak for them. One category may be active
at a time: with none active the board shows its categories, with one active
it shows that category's images.

Board file format (one entry per line, whitespace around a line ignored)::

    one fruit
    >apple.png apple
    >banana.png banana
    two veg
    >carrot.png carrot

A line without a leading ``>`` declares a category (identifier, then label);
a ``>`` line declares an item of the category declared above it. Both are
split on the first space only, so labels and captions may contain spaces.
"""

import codecs
import enum
import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from aac_category import AACCategory
from aac_errors import (
    AlreadyActiveError,
    BoardIOError,
    ItemNotFoundError,
    MissingActiveCategoryError,
    NoActiveCategoryError,
    NoCategoriesAvailableError,
    NotFoundError,
    NullKeyError,
)

logger = logging.getLogger(__name__)

ITEM_PREFIX = ">"

# Everything a board file read or write can fail with: missing or unwritable
# paths, paths with NUL bytes, unknown codecs, text the codec cannot handle.
FILE_ERRORS = (OSError, UnicodeError, ValueError, LookupError)


def _read_encoding(encoding: str) -> str:
    """Read UTF-8 boards as utf-8-sig so a leading BOM is not part of the first id."""
    if codecs.lookup(encoding).name == "utf-8":
        return "utf-8-sig"
    return encoding


class ReselectPolicy(enum.Enum):
    """What ``select`` does when asked for the category that is already active."""
    ERROR = "error"
    NOOP = "noop"


@dataclass
class BoardFileReport:
    """Outcome of a board file load or save."""
    path: str
    ok: bool = True
    error: Optional[str] = None
    categories: int = 0
    items: int = 0
    skipped_lines: list[int] = field(default_factory=list)


def split_pair(text: str) -> Optional[tuple[str, str]]:
    """Split ``text`` on its first space; None unless that gives two tokens."""
    tokens = text.split(" ", 1)
    if len(tokens) != 2:
        return None
    return tokens[0], tokens[1]


class AACMappings:
    """Category registry plus the navigation state of the board."""

    def __init__(self, path: Optional[str] = None,
                 reselect_policy: ReselectPolicy = ReselectPolicy.ERROR,
                 encoding: str = "utf-8"):
        self._categories: dict[str, AACCategory] = {}
        self._active = ""
        self.reselect_policy = ReselectPolicy(reselect_policy)
        self.encoding = encoding
        self.last_load: Optional[BoardFileReport] = None
        if path is not None:
            self.last_load = self.load(path)

    # ----------------------------
    # Loading
    # ----------------------------
    def load(self, path: str, strict: bool = False, encoding: Optional[str] = None) -> BoardFileReport:
        """Read categories and items from ``path`` into this board.

        Loading is best effort: whatever was parsed before a failure stays
        in the board. The failure is logged and recorded in the returned
        report, or raised as ``BoardIOError`` when ``strict`` is set. Either
        way the board comes back with no active category.
        """
        report = BoardFileReport(path=str(path))
        pending = None
        try:
            with open(path, "r", encoding=_read_encoding(encoding or self.encoding)) as fh:
                for lineno, raw in enumerate(fh, start=1):
                    line = raw.strip()
                    if not line.startswith(ITEM_PREFIX):
                        pair = split_pair(line)
                        if pair is None:
                            report.skipped_lines.append(lineno)
                            logger.debug("%s:%d: skipped category line %r", path, lineno, line)
                            continue
                        cat_id, label = pair
                        pending = self.create_category(cat_id, label)
                        continue

                    if pending is None:
                        report.skipped_lines.append(lineno)
                        logger.debug("%s:%d: item before any category; skipped", path, lineno)
                        continue
                    pair = split_pair(line[len(ITEM_PREFIX):])
                    if pair is None:
                        report.skipped_lines.append(lineno)
                        logger.debug("%s:%d: skipped item line %r", path, lineno, line)
                        continue
                    pending.add_item(*pair)
        except FILE_ERRORS as e:
            report.ok = False
            report.error = str(e)
            logger.warning("Error loading mappings from %r: %s", path, e)
            if strict:
                raise BoardIOError("Error loading mappings from {!r}: {}".format(path, e)) from e
        finally:
            self._active = ""

        report.categories = len(self._categories)
        report.items = sum(len(c) for c in self._categories.values())
        logger.debug("Loaded %s: %d categories, %d items, %d skipped lines",
                     path, report.categories, report.items, len(report.skipped_lines))
        return report

    # ----------------------------
    # Saving
    # ----------------------------
    def write_to_file(self, path: str, strict: bool = False, encoding: Optional[str] = None) -> BoardFileReport:
        """Save every category and item to ``path`` in board file format.

        The whole board is encoded before the file is opened, so a caption
        the encoding cannot represent leaves an existing file untouched.
        Failures are logged and reported; the in-memory board stays usable.
        """
        report = BoardFileReport(path=str(path))
        lines = []
        for cat_id, category in self._categories.items():
            label = category.label
            if not label:
                # an empty label would reload as a one-token line
                logger.debug("Category %r has no label; writing its identifier", cat_id)
                label = cat_id
            lines.append("{} {}\n".format(cat_id, label))
            report.categories += 1
            for image_loc, caption in category.items():
                lines.append("{}{} {}\n".format(ITEM_PREFIX, image_loc, caption))
                report.items += 1

        try:
            data = "".join(lines).encode(encoding or self.encoding)
            with open(path, "wb") as fh:
                fh.write(data)
        except FILE_ERRORS as e:
            report.ok = False
            report.error = str(e)
            logger.warning("Error writing mappings to %r: %s", path, e)
            if strict:
                raise BoardIOError("Error writing mappings to {!r}: {}".format(path, e)) from e
        else:
            logger.debug("Saved %s: %d categories, %d items", path, report.categories, report.items)
        return report

    # ----------------------------
    # Building the board
    # ----------------------------
    def create_category(self, identifier: str, label: Optional[str] = None) -> AACCategory:
        """Return the category ``identifier``, creating it if needed.

        A non-None ``label`` replaces the current one. The active category
        is left alone.
        """
        if not identifier:
            raise NullKeyError("A category needs an identifier")
        category = self._categories.get(identifier)
        if category is None:
            category = AACCategory(identifier, label or "")
            self._categories[identifier] = category
        elif label is not None:
            category.label = label
        return category

    def add_item_to_active(self, image_loc: str, caption: str) -> None:
        """Add an image and its caption to the active category."""
        if not self._active:
            raise NoActiveCategoryError("No category is currently selected.")
        self._active_category().add_item(image_loc, caption)

    def add_item(self, image_loc: str, caption: str) -> None:
        """Add an image to the active category, or start a category.

        With no active category, ``image_loc`` is taken as a category
        identifier instead: the category is created if new and becomes
        active, and ``caption`` is ignored. New code should prefer
        ``create_category`` plus ``add_item_to_active``.
        """
        if self._active:
            self.add_item_to_active(image_loc, caption)
            return
        if not image_loc:
            logger.warning("Null key provided for new category; nothing added")
            return
        self.create_category(image_loc)
        self._active = image_loc

    # ----------------------------
    # Navigation
    # ----------------------------
    def select(self, image_loc: str) -> str:
        """Select a category or an image of the active category.

        Selecting a category makes it active and returns an empty string;
        selecting an image returns the text to speak for it.
        """
        if not self._categories:
            raise NoCategoriesAvailableError("No categories are available.")

        if image_loc in self._categories:
            if image_loc == self._active:
                if self.reselect_policy is ReselectPolicy.NOOP:
                    return ""
                raise AlreadyActiveError("Category '{}' is already selected.".format(image_loc))
            self._active = image_loc
            return ""

        if not self._active:
            raise NoActiveCategoryError("No category is currently selected.")

        category = self._active_category()
        if not category.has_image(image_loc):
            raise ItemNotFoundError("Image location not found in category: {}".format(image_loc))
        return category.select(image_loc)

    def reset(self) -> None:
        """Go back to the top-level view."""
        self._active = ""

    def get_active(self) -> str:
        return self._active

    # ----------------------------
    # Accessors
    # ----------------------------
    def get_category(self) -> str:
        """Label of the active category, or "" when there is none."""
        category = self._categories.get(self._active) if self._active else None
        return category.label if category is not None else ""

    def get_image_locs(self) -> list[str]:
        """Items of the active category, or the category ids when none is active."""
        if not self._active:
            return self.get_top_level_categories()
        category = self._categories.get(self._active)
        if category is None:
            return []
        return category.get_image_locs()

    def get_top_level_categories(self) -> list[str]:
        return list(self._categories)

    def has_image(self, image_loc: str) -> bool:
        if not self._active:
            return False
        category = self._categories.get(self._active)
        if category is None:
            logger.warning("Active category %r not found", self._active)
            return False
        return category.has_image(image_loc)

    def is_category(self, image_loc: str) -> bool:
        return image_loc in self._categories

    def get_label(self, identifier: str) -> str:
        category = self._categories.get(identifier)
        return category.label if category is not None else ""

    def get_store(self, identifier: str) -> AACCategory:
        try:
            return self._categories[identifier]
        except KeyError:
            raise NotFoundError("Category '{}' does not exist.".format(identifier)) from None

    def category_labels(self) -> dict[str, str]:
        """Ordered {category id: label}."""
        return {cat_id: c.label for cat_id, c in self._categories.items()}

    def _active_category(self) -> AACCategory:
        category = self._categories.get(self._active)
        if category is None:
            raise MissingActiveCategoryError("Category '{}' does not exist.".format(self._active))
        return category

    def __len__(self):
        return len(self._categories)

    def __contains__(self, identifier):
        return identifier in self._categories

    def __repr__(self):
        return "AACMappings(categories={}, active={!r})".format(len(self._categories), self._active)

    @classmethod
    def from_file(cls, path, **kwargs) -> "AACMappings":
        """Build a board from ``path``; raises FileNotFoundError if it is missing."""
        if not os.path.exists(path):
            raise FileNotFoundError("board file not found at: {}".format(os.path.abspath(path)))
        return cls(path, **kwargs)
