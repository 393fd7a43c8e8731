"""Unit tests for mctschess_src.util.config helper module."""

import pytest

from mctschess_src.util import config as config_module
from mctschess_src.util.config import get_key, is_verbose


def test_get_key():
    assert get_key("mcts.max_playouts") > 0, (
        "Expected to successfully read 'mcts.max_playouts' to be a positive integer."
    )


def test_get_key_nested_section():
    section = get_key("mcts")
    assert isinstance(section, dict)
    assert section["exploration_constant"] == get_key("mcts.exploration_constant")


def test_get_key_default():
    assert get_key("mcts.not_a_key", 3) == 3
    assert get_key("mcts.max_playouts.too_deep") is None


def test_is_verbose_is_bool():
    assert isinstance(is_verbose(), bool)
    assert isinstance(is_verbose("mcts"), bool)


def test_section_verbose_falls_back_to_logging(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(
        config_module, "config", {"logging": {"verbose": True}, "mcts": {"verbose": False}}
    )
    assert is_verbose() is True
    assert is_verbose("mcts") is False
    assert is_verbose("game") is True
