"""
Customer insight endpoints.

Risk profile preview used by admins before entering a manual order.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import Actor, get_actor, get_risk_service
from api.errors import forbidden, raise_for_outcome
from core.application.dtos import CustomerRiskDTO
from core.application.services import CustomerRiskService


router = APIRouter()


@router.get(
    "/insights",
    response_model=CustomerRiskDTO,
    summary="Customer risk profile",
    description="Order history summary and risk tier for an email, phone or account",
)
async def customer_insights(
    email: Optional[str] = Query(default=None),
    phone: Optional[str] = Query(default=None),
    user_id: Optional[str] = Query(default=None),
    actor: Actor = Depends(get_actor),
    service: CustomerRiskService = Depends(get_risk_service),
):
    if not actor.is_admin:
        raise forbidden()

    outcome = await service.profile(email=email, phone=phone, user_id=user_id)
    raise_for_outcome(outcome)
    return CustomerRiskDTO.from_profile(outcome.value)
