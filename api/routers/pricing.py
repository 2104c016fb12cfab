"""
Pricing API Endpoints.

Endpoints for division pricing and platform plans.
"""

from fastapi import APIRouter, Query

from api.models import (
    PlatformFeeRequest,
    PlatformFeeResponse,
    PricingResolveRequest,
    PricingResolveResponse,
    SubscriptionPlanResponse,
)
from domain.pricing import resolve_division_pricing
from services.platform_pricing_service import (
    SUBSCRIPTION_PLANS,
    SubscriptionPlan,
    calculate_platform_fee,
    can_add_active_event,
    format_plan_price,
    get_plan,
)

router = APIRouter()


@router.post(
    "/pricing/resolve",
    response_model=PricingResolveResponse,
    summary="Resolve Division Price",
    description="Resolve the early-bird or regular price that applies at a reference date."
)
def resolve_pricing(request: PricingResolveRequest):
    """
    Resolve the active price for a division.

    The early-bird deadline is inclusive to the end of that local calendar
    day. Without `reference_date` the current time is used.
    """
    rate = resolve_division_pricing(request.pricing.to_domain(), request.reference_date)
    return PricingResolveResponse(price=rate.price, tier=rate.tier.value)


def _plan_response(plan: SubscriptionPlan) -> SubscriptionPlanResponse:
    return SubscriptionPlanResponse(
        id=plan.id.value,
        name=plan.name,
        price_cents=plan.price_cents,
        price_label=plan.price_label,
        display_price=format_plan_price(plan),
        billing_period=plan.billing_period,
        active_event_limit=plan.active_event_limit,
        features=list(plan.features),
    )


@router.get("/plans", response_model=list[SubscriptionPlanResponse], summary="List Subscription Plans")
def list_plans():
    return [_plan_response(plan) for plan in SUBSCRIPTION_PLANS.values()]


@router.get("/plans/{plan_id}", response_model=SubscriptionPlanResponse, summary="Get Subscription Plan")
def read_plan(plan_id: str):
    """Get a plan by id. Unknown ids return the free plan."""
    return _plan_response(get_plan(plan_id))


@router.get("/plans/{plan_id}/can-activate", summary="Check Active Event Limit")
def check_active_event_limit(plan_id: str, active_count: int = Query(..., ge=0)):
    """Whether an organizer on this plan may activate another event."""
    plan = get_plan(plan_id)
    return {
        "plan_id": plan.id.value,
        "active_event_limit": plan.active_event_limit,
        "active_count": active_count,
        "allowed": can_add_active_event(plan, active_count),
    }


@router.post("/platform-fee", response_model=PlatformFeeResponse, summary="Calculate Platform Fee")
def platform_fee(request: PlatformFeeRequest):
    """Platform fee charged to the organizer for an invoice subtotal."""
    return PlatformFeeResponse(
        subtotal=request.subtotal,
        platform_fee=calculate_platform_fee(request.subtotal),
    )
