# Ensure the project root is on sys.path so tests can import the board modules without an install
import os
import sys

import pytest

HERE = os.path.dirname(__file__)
ROOT = os.path.abspath(os.path.join(HERE, ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

SCENARIO = "one fruit\n>apple.png apple\n>banana.png banana\ntwo veg\n>carrot.png carrot\n"


@pytest.fixture
def board_file(tmp_path):
    path = tmp_path / "board.txt"
    path.write_text(SCENARIO, encoding="utf-8")
    return path


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    path = tmp_path / "settings.ini"
    monkeypatch.setenv("AAC_SETTINGS_FILE", str(path))
    return path
