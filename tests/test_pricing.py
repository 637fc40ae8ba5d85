import pytest
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from homemove.schemas.schemas import RateCard, CategoryRate, LineItem
from homemove.services.pricing import (
    describe_distance,
    floor_surcharge,
    format_money,
    price_distance,
    price_line_item,
    round_money,
    split_distance,
    temporal_factors,
    temporal_multiplier,
)


@pytest.fixture
def card():
    return RateCard(
        per_km_first_tier=15000,
        per_km_mid_tier=10000,
        per_km_last_tier=8000,
        peak_multiplier=1.2,
        weekend_multiplier=1.5,
        holiday_multiplier=2.0,
    )


class TestRounding:
    def test_half_rounds_up(self):
        assert round_money(2.5) == 3
        assert round_money(3.5) == 4

    def test_below_half_rounds_down(self):
        assert round_money(0.49) == 0

    def test_money_formatting(self):
        assert format_money(1500000) == "1,500,000đ"
        assert format_money(0) == "0đ"


class TestDistancePricing:
    def test_zero_distance(self, card):
        assert price_distance(0, card) == 0

    def test_first_tier(self, card):
        assert price_distance(2.5, card) == 37500

    def test_mid_tier(self, card):
        # 4*15000 + 6*10000
        assert price_distance(10, card) == 120000

    def test_last_tier(self, card):
        # 4*15000 + 36*10000 + 10*8000
        assert price_distance(50, card) == 500000

    def test_continuous_at_breakpoints(self, card):
        assert price_distance(4, card) == 4 * card.per_km_first_tier
        assert price_distance(40, card) == 4 * card.per_km_first_tier + 36 * card.per_km_mid_tier
        assert price_distance(4.001, card) - price_distance(4, card) == 10
        assert price_distance(40.001, card) - price_distance(40, card) == 8

    def test_monotonic(self, card):
        prices = [price_distance(step / 4, card) for step in range(0, 400)]
        assert prices == sorted(prices)

    def test_rounded_once_at_end(self):
        odd_card = RateCard(per_km_first_tier=3, per_km_mid_tier=3, per_km_last_tier=3)
        # 4*3 + 0.5*3 = 13.5
        assert price_distance(4.5, odd_card) == 14

    def test_split(self):
        assert split_distance(2) == (2, 0, 0)
        assert split_distance(10) == (4, 6, 0)
        assert split_distance(55) == (4, 36, 15)

    def test_describe_short_trip(self, card):
        assert describe_distance(2.5, card) == "2.5km x 15,000đ"

    def test_describe_mid_trip(self, card):
        assert describe_distance(10, card) == "4km x 15,000đ + 6.0km x 10,000đ"

    def test_describe_long_trip(self, card):
        assert describe_distance(50, card) == "4km x 15,000đ + 36.0km x 10,000đ + 10.0km x 8,000đ"


class TestLineItemPricing:
    def test_no_modifiers(self):
        rate = CategoryRate(base_price=200000, fragile_multiplier=1.5)
        item = LineItem(category_id=1, quantity=3)
        assert price_line_item(item, rate) == 600000

    def test_fragile(self):
        rate = CategoryRate(base_price=200000, fragile_multiplier=1.5)
        item = LineItem(category_id=1, is_fragile=True)
        assert price_line_item(item, rate) == 300000

    def test_all_modifiers_compose(self):
        rate = CategoryRate(
            base_price=100000,
            fragile_multiplier=1.5,
            disassembly_multiplier=1.2,
            heavy_multiplier=1.1,
        )
        item = LineItem(
            category_id=1, quantity=2,
            is_fragile=True, requires_disassembly=True, is_heavy=True,
        )
        # 100000 * 1.5 * 1.2 * 1.1 = 198000 per unit
        assert price_line_item(item, rate) == 396000

    def test_unused_multipliers_ignored(self):
        rate = CategoryRate(base_price=50000, heavy_multiplier=3.0)
        item = LineItem(category_id=1, is_fragile=True)
        assert price_line_item(item, rate) == 50000

    def test_unit_price_rounded_before_quantity(self):
        rate = CategoryRate(base_price=333, fragile_multiplier=1.5)
        item = LineItem(category_id=1, quantity=3, is_fragile=True)
        # 499.5 -> 500 per unit, not round(1498.5)
        assert price_line_item(item, rate) == 1500


class TestTemporalMultiplier:
    def test_weekday_noon_has_no_surge(self, card):
        # Wednesday
        assert temporal_multiplier(datetime(2026, 10, 21, 12, 0), card) == 1.0

    @pytest.mark.parametrize("hour,minute,expected", [
        (6, 59, False),
        (7, 0, True),
        (8, 59, True),
        (9, 0, False),
        (16, 59, False),
        (17, 30, True),
        (19, 0, False),
    ])
    def test_peak_hour_bounds(self, hour, minute, expected):
        factors = temporal_factors(datetime(2026, 10, 21, hour, minute))
        assert factors.is_peak_hour is expected

    def test_weekend(self, card):
        saturday = datetime(2026, 10, 24, 12, 0)
        sunday = datetime(2026, 10, 25, 12, 0)
        assert temporal_factors(saturday).is_weekend
        assert temporal_factors(sunday).is_weekend
        assert temporal_multiplier(saturday, card) == 1.5

    @pytest.mark.parametrize("month,day", [(1, 1), (4, 30), (5, 1), (9, 2)])
    def test_fixed_holidays(self, month, day):
        assert temporal_factors(datetime(2026, month, day, 12, 0)).is_holiday
        assert temporal_factors(datetime(2031, month, day, 12, 0)).is_holiday

    def test_regular_day_is_not_holiday(self):
        assert not temporal_factors(datetime(2026, 9, 3, 12, 0)).is_holiday

    def test_factors_stack(self, card):
        # Saturday, Labour Day, morning rush
        scheduled = datetime(2027, 5, 1, 8, 0)
        factors = temporal_factors(scheduled)
        assert factors == (True, True, True)
        assert temporal_multiplier(scheduled, card) == pytest.approx(1.2 * 1.5 * 2.0)

    def test_aware_timestamp_read_in_local_zone(self):
        # 01:00 UTC is 08:00 in Ho Chi Minh City
        scheduled = datetime(2026, 10, 21, 1, 0, tzinfo=timezone.utc)
        assert not temporal_factors(scheduled).is_peak_hour
        assert temporal_factors(scheduled, ZoneInfo("Asia/Ho_Chi_Minh")).is_peak_hour


class TestFloorSurcharge:
    def test_ground_floor(self):
        assert floor_surcharge(1, False, 50000) == 0

    def test_stairs_charged_per_floor(self):
        assert floor_surcharge(3, False, 50000) == 100000

    def test_elevator_waives_fee(self):
        assert floor_surcharge(7, True, 50000) == 0

    def test_basement_not_charged(self):
        assert floor_surcharge(0, False, 50000) == 0
