"""Campaign scope matching."""

from datetime import datetime

from storefront.pricing.types import Campaign, CampaignScope, PricingContext


def is_running(campaign: Campaign, now: datetime) -> bool:
    """True when the campaign is active and *now* is inside its window.

    Both window bounds are inclusive, so a campaign with
    ``starts_at == ends_at`` is valid for exactly that instant.
    """
    return campaign.active and campaign.starts_at <= now <= campaign.ends_at


def matches(campaign: Campaign, context: PricingContext, now: datetime) -> bool:
    """Decide whether *campaign* applies to *context* at time *now*.

    Product links are not checked here; callers drop unlinked campaigns
    before asking.  A ``PER_CLIENT`` campaign never matches a context without
    a client, whatever its allow-list holds.
    """
    if not is_running(campaign, now):
        return False

    scope = campaign.scope
    if scope is CampaignScope.GLOBAL:
        return True
    if scope is CampaignScope.PER_LIST:
        return campaign.target_list_id == context.price_list_id
    if scope is CampaignScope.PER_CLIENT:
        return context.client_id is not None and context.client_id in campaign.client_ids
    raise ValueError(f"Unknown campaign scope: {scope!r}")
