"""Unit tests for the Cursor value object."""

import pytest

from gmailrelay.domain.entities.cursor import Cursor


class TestCursor:
    """Tests for ordering and normalisation."""

    def test_orders_numerically_not_lexically(self) -> None:
        assert Cursor("99") < Cursor("100")
        assert max(Cursor("115"), Cursor("20")) == Cursor("115")

    def test_normalises_value(self) -> None:
        assert Cursor(" 0042 ").value == "42"
        assert str(Cursor("7")) == "7"

    def test_equal_values_compare_equal(self) -> None:
        assert Cursor("115") == Cursor("115")
        assert not Cursor("115") < Cursor("115")

    @pytest.mark.parametrize("value", ["", "abc", "-1", "1.5"])
    def test_rejects_non_numeric(self, value: str) -> None:
        with pytest.raises(ValueError):
            Cursor(value)
