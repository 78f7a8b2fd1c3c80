"""A single page of the board: one category and its image -> caption items."""

import logging

from aac_errors import ItemNotFoundError

logger = logging.getLogger(__name__)


class AACCategory:
    """Mappings for one category.

    ``name`` is the category identifier used in board files and never
    changes. ``label`` is the text shown for the category (e.g. "one" ->
    "fruit"); it is empty until a category line supplies one.
    """

    def __init__(self, name: str, label: str = ""):
        self.name = name
        self.label = label
        self._items: dict[str, str] = {}

    def add_item(self, image_loc, text) -> None:
        """Add or overwrite the caption spoken for ``image_loc``."""
        if image_loc is None:
            logger.warning("Null key provided for image in category %r; item skipped", self.name)
            return
        self._items[image_loc] = text

    def get_image_locs(self) -> list[str]:
        """Return every image identifier, in the order they were added."""
        return list(self._items)

    def get_category(self) -> str:
        return self.name

    def select(self, image_loc) -> str:
        try:
            return self._items[image_loc]
        except KeyError:
            raise ItemNotFoundError("Image location not found: {}".format(image_loc)) from None

    def has_image(self, image_loc) -> bool:
        return image_loc in self._items

    def items(self) -> list[tuple[str, str]]:
        """Ordered (image, caption) pairs; used when saving."""
        return list(self._items.items())

    def __len__(self):
        return len(self._items)

    def __contains__(self, image_loc):
        return image_loc in self._items

    def __repr__(self):
        return "AACCategory(name={!r}, label={!r}, items={})".format(self.name, self.label, len(self._items))
