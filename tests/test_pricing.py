import pytest

from translation_desk.services.pricing import (
    HARD_COPY_FEE,
    DeliveryTier,
    calculate_price,
    parse_page_count,
    parse_tier,
)


class TestCalculatePrice:
    def test_standard_rate(self):
        assert calculate_price(3, DeliveryTier.STANDARD) == 1050

    def test_same_day_with_hard_copy(self):
        assert calculate_price(3, DeliveryTier.SAME_DAY, hard_copy=True) == 1700

    def test_next_day_from_digit_string(self):
        assert calculate_price("2", "NEXT_DAY") == 900

    def test_hard_copy_fee_added_once(self):
        assert calculate_price(1, DeliveryTier.STANDARD, hard_copy=True) == 350 + HARD_COPY_FEE

    @pytest.mark.parametrize("pages", [0, -4, "", "abc", "2.5", None, True])
    def test_invalid_page_count_prices_at_zero(self, pages):
        assert calculate_price(pages, DeliveryTier.STANDARD) == 0

    def test_same_inputs_same_output(self):
        first = calculate_price(7, DeliveryTier.NEXT_DAY, hard_copy=True)
        assert all(calculate_price(7, DeliveryTier.NEXT_DAY, hard_copy=True) == first for _ in range(5))


class TestParseTier:
    def test_blank_defaults_to_standard(self):
        assert parse_tier("") == DeliveryTier.STANDARD
        assert parse_tier(None) == DeliveryTier.STANDARD

    def test_case_insensitive(self):
        assert parse_tier("same_day") == DeliveryTier.SAME_DAY

    def test_legacy_aliases(self):
        assert parse_tier("URGENT") == DeliveryTier.NEXT_DAY
        assert parse_tier("express") == DeliveryTier.SAME_DAY

    def test_unknown_tier_rejected(self):
        with pytest.raises(ValueError):
            parse_tier("OVERNIGHT")


class TestParsePageCount:
    def test_accepts_padded_digits(self):
        assert parse_page_count(" 12 ") == 12

    def test_rejects_zero(self):
        assert parse_page_count("0") is None
