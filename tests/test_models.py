"""Tests for prokill data models."""

from prokill.models import InputMode, ProcessEntry, SortMode


def test_process_entry_creation():
    """Test ProcessEntry dataclass creation."""
    entry = ProcessEntry(pid=123, name="test_process")

    assert entry.pid == 123
    assert entry.name == "test_process"


def test_process_entry_is_frozen():
    """Test that ProcessEntry is immutable (frozen)."""
    entry = ProcessEntry(pid=1, name="init")

    try:
        entry.pid = 999
        raise AssertionError("Should have raised FrozenInstanceError")
    except AttributeError:
        pass  # Expected behavior for frozen dataclass


def test_process_entry_uses_slots():
    """Test that ProcessEntry uses __slots__."""
    entry = ProcessEntry(pid=1, name="init")

    assert not hasattr(entry, "__dict__")


def test_process_entry_equality():
    """Test entries with the same pid and name compare equal."""
    assert ProcessEntry(pid=7, name="vim") == ProcessEntry(pid=7, name="vim")
    assert ProcessEntry(pid=7, name="vim") != ProcessEntry(pid=8, name="vim")


class TestEnums:
    """Tests for SortMode and InputMode."""

    def test_sort_mode_values(self):
        assert SortMode.NONE.value == "none"
        assert SortMode.ASCENDING.value == "asc"
        assert SortMode.DESCENDING.value == "desc"
        assert len(list(SortMode)) == 3

    def test_input_mode_values(self):
        assert InputMode.NORMAL.value == "normal"
        assert InputMode.EDITING.value == "editing"
        assert len(list(InputMode)) == 2
