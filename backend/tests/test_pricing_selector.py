"""Tests for best-deal selection."""

import uuid
from decimal import Decimal

from storefront.pricing import CampaignScope, DiscountKind, select_best


class TestSelectBest:
    def test_no_campaigns_returns_base(self):
        deal = select_best(Decimal("100.00"), [])
        assert deal.price == Decimal("100.00")
        assert deal.winning_campaign_id is None
        assert deal.savings == Decimal("0.00")
        assert deal.discount_percent == 0

    def test_percentage_beats_smaller_fixed_amount(self, make_campaign):
        a = make_campaign(id=1, kind=DiscountKind.PERCENTAGE, value="20")
        b = make_campaign(
            id=2,
            kind=DiscountKind.FIXED_AMOUNT,
            value="10",
            scope=CampaignScope.PER_LIST,
            target_list_id=1,
        )
        deal = select_best(Decimal("100.00"), [a, b])
        assert deal.winning_campaign_id == 1
        assert deal.price == Decimal("80.00")
        assert deal.savings == Decimal("20.00")
        assert deal.discount_percent == 20

    def test_fixed_amount_larger_than_price(self, make_campaign):
        campaign = make_campaign(kind=DiscountKind.FIXED_AMOUNT, value="75")
        deal = select_best(Decimal("50.00"), [campaign])
        assert deal.price == Decimal("0.00")
        assert deal.savings == Decimal("50.00")
        assert deal.discount_percent == 100

    def test_fixed_amount_percent_is_derived_and_rounded(self, make_campaign):
        campaign = make_campaign(kind=DiscountKind.FIXED_AMOUNT, value="40")
        deal = select_best(Decimal("90.00"), [campaign])
        assert deal.price == Decimal("50.00")
        # 40 / 90 = 44.44 %
        assert deal.discount_percent == 44

    def test_percentage_reports_configured_value(self, make_campaign):
        campaign = make_campaign(kind=DiscountKind.PERCENTAGE, value="12.5")
        deal = select_best(Decimal("19.99"), [campaign])
        assert deal.discount_percent == Decimal("12.5")

    def test_tie_keeps_first_evaluated(self, make_campaign):
        first = make_campaign(id=7, kind=DiscountKind.FIXED_AMOUNT, value="20")
        second = make_campaign(id=3, kind=DiscountKind.PERCENTAGE, value="20")
        assert select_best(Decimal("100.00"), [first, second]).winning_campaign_id == 7
        assert select_best(Decimal("100.00"), [second, first]).winning_campaign_id == 3

    def test_price_above_base_never_wins(self, make_campaign):
        campaign = make_campaign(kind=DiscountKind.PERCENTAGE, value="-10")
        deal = select_best(Decimal("100.00"), [campaign])
        assert deal.price == Decimal("100.00")
        assert deal.winning_campaign_id is None

    def test_zero_percent_is_not_a_winner(self, make_campaign):
        campaign = make_campaign(kind=DiscountKind.PERCENTAGE, value="0")
        deal = select_best(Decimal("100.00"), [campaign])
        assert deal.winning_campaign_id is None

    def test_never_above_base_when_a_lower_candidate_exists(self, make_campaign):
        campaigns = [
            make_campaign(id=1, kind=DiscountKind.PERCENTAGE, value="-50"),
            make_campaign(id=2, kind=DiscountKind.FIXED_AMOUNT, value="1"),
            make_campaign(id=3, kind=DiscountKind.PERCENTAGE, value="-5"),
        ]
        deal = select_best(Decimal("10.00"), campaigns)
        assert deal.price == Decimal("9.00")
        assert deal.winning_campaign_id == 2

    def test_zero_base_price(self, make_campaign):
        campaign = make_campaign(kind=DiscountKind.FIXED_AMOUNT, value="5")
        deal = select_best(Decimal("0.00"), [campaign])
        assert deal.winning_campaign_id is None
        assert deal.discount_percent == 0

    def test_override_on_percentage_campaign_derives_percent(self, make_campaign):
        product_id = uuid.uuid4()
        campaign = make_campaign(
            kind=DiscountKind.PERCENTAGE,
            value="10",
            product_ids=frozenset({product_id}),
            fixed_offer_prices={product_id: Decimal("75.00")},
        )
        deal = select_best(Decimal("100.00"), [campaign], product_id=product_id)
        assert deal.price == Decimal("75.00")
        assert deal.discount_percent == 25
