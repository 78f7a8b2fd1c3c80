"""Utility helpers for board file maintenance and data hygiene.

This module contains small tools to:
1) scan a board file for duplicates before they silently overwrite each other,
2) mirror a board to and from YAML for hand editing,
3) flatten a board into a table (pandas) and export it as CSV,
4) pretty-print quick reports while you're editing.

Notes
-----
- Board files are plain dicts underneath: a category or image declared twice
  keeps only the later caption/label. ``find_duplicate_entries`` reads the
  raw lines so those collisions can be reported instead of lost.
- Export helpers return the absolute path of the file they wrote.
"""

import io
import logging
import os

import pandas as pd
import yaml

from aac_mappings import AACMappings, ITEM_PREFIX, split_pair


logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["category", "label", "image", "caption"]


# ----------------------------
# 1) Duplicate scanners
# ----------------------------
def find_duplicate_entries(path, encoding="utf-8"):
    """Find identifiers declared more than once in a board file.

    Parameters
    ----------
    path : str
        Board file to scan.

    Returns
    -------
    list
        ``(category, image, line_numbers)`` tuples. ``image`` is None for a
        repeated category line. Line numbers are 1-based.
    """
    if not os.path.exists(path):
        raise IOError("board file not found at: {}".format(os.path.abspath(path)))

    index = {}
    pending = None
    with io.open(path, "r", encoding=encoding) as fh:
        for lineno, raw in enumerate(fh, start=1):
            line = raw.strip()
            if not line.startswith(ITEM_PREFIX):
                pair = split_pair(line)
                if pair is None:
                    continue
                pending = pair[0]
                index.setdefault((pending, None), []).append(lineno)
            elif pending is not None:
                pair = split_pair(line[len(ITEM_PREFIX):])
                if pair is None:
                    continue
                index.setdefault((pending, pair[0]), []).append(lineno)

    dups = []
    for (cat, image), lines in index.items():
        if len(lines) > 1:
            dups.append((cat, image, lines))
    return dups


def format_duplicate_report(dups):
    if not dups:
        return "No duplicate identifiers found."
    lines = ["Duplicate identifiers (later declaration wins):"]
    for cat, image, locs in dups:
        if image is None:
            lines.append("- category {} at lines {}".format(cat, locs))
        else:
            lines.append("- {} in {} at lines {}".format(image, cat, locs))
    return "\n".join(lines)


# ----------------------------
# 2) YAML mirror
# ----------------------------
def board_to_dict(board):
    """Return ``{category: {"label": str, "items": {image: caption}}}`` in board order."""
    out = {}
    for cat_id in board.get_top_level_categories():
        store = board.get_store(cat_id)
        out[cat_id] = {"label": store.label, "items": dict(store.items())}
    return out


def export_board_yaml(board, out_path="board.yaml"):
    """Write the board as YAML, keeping category and item order."""
    with open(out_path, "w", encoding="utf-8") as fh:
        yaml.safe_dump(board_to_dict(board), fh, allow_unicode=True, sort_keys=False)
    logger.debug("board YAML saved (%d categories) to %s", len(board), out_path)
    return os.path.abspath(out_path)


def load_board_yaml(path="board.yaml", **kwargs):
    """Build an ``AACMappings`` from a YAML mirror written by ``export_board_yaml``.

    Accepts the shorthand ``{category: label}`` too (a category with no items).
    Extra keyword arguments go to the ``AACMappings`` constructor.
    """
    if not os.path.exists(path):
        raise IOError("board YAML not found at: {}".format(os.path.abspath(path)))
    with io.open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh.read()) or {}
    if not isinstance(data, dict):
        raise ValueError("board YAML must be a mapping, got {}".format(type(data).__name__))

    board = AACMappings(**kwargs)
    for cat_id, val in data.items():
        if isinstance(val, dict):
            label = str(val.get("label") or "")
            items = val.get("items") or {}
        else:
            label = "" if val is None else str(val)
            items = {}
        store = board.create_category(str(cat_id), label)
        if not isinstance(items, dict):
            logger.warning("items for category %r are a %s, not a mapping; skipped",
                           cat_id, type(items).__name__)
            continue
        for image, caption in items.items():
            store.add_item(str(image), "" if caption is None else str(caption))
    return board


# ----------------------------
# 3) Tabular export
# ----------------------------
def board_frame(board):
    """Flatten the board into one row per item.

    A category with no items still gets a row, with empty image and caption,
    so every category shows up in the table.
    """
    rows = []
    for cat_id in board.get_top_level_categories():
        store = board.get_store(cat_id)
        pairs = store.items()
        if not pairs:
            rows.append((cat_id, store.label, "", ""))
        for image, caption in pairs:
            rows.append((cat_id, store.label, image, caption))
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def export_board_csv(board, out_path="board_export.csv"):
    """Write CSV: category,label,image,caption."""
    board_frame(board).to_csv(out_path, index=False, encoding="utf-8")
    return os.path.abspath(out_path)


# ----------------------------
# 4) Pretty report helpers
# ----------------------------
def format_board_summary(board):
    lines = ["Board: {} categories".format(len(board))]
    for cat_id in board.get_top_level_categories():
        store = board.get_store(cat_id)
        lines.append("- {} ({}): {} items".format(cat_id, store.label or "no label", len(store)))
    return "\n".join(lines)
