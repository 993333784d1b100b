"""Tests for form ID formatting and validation."""

import pytest

from pantryform.domain.ids import FORM_ID_WIDTH, format_form_id, validate_form_id


class TestFormatFormId:
    def test_first_generated_id(self) -> None:
        assert format_form_id(100000000543) == "100000000543"

    def test_zero_padded(self) -> None:
        assert format_form_id(42) == "000000000042"
        assert len(format_form_id(42)) == FORM_ID_WIDTH

    def test_custom_width(self) -> None:
        assert format_form_id(7, width=4) == "0007"

    def test_wider_values_grow(self) -> None:
        assert format_form_id(1234567890123) == "1234567890123"

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            format_form_id(-1)


class TestValidateFormId:
    @pytest.mark.parametrize("form_id", ["100000000543", "000000000001", "1234567890123"])
    def test_valid(self, form_id: str) -> None:
        assert validate_form_id(form_id)

    @pytest.mark.parametrize("form_id", ["", "12345", "10000000054A", " 100000000543"])
    def test_invalid(self, form_id: str) -> None:
        assert not validate_form_id(form_id)

    def test_width_follows_configuration(self) -> None:
        assert validate_form_id("000042", width=6)
        assert not validate_form_id("00042", width=6)
        assert not validate_form_id("000042")
