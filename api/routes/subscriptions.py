"""
Subscription endpoints.

Manual trigger of the renewal sweep (the scheduler runs it periodically).
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import Actor, get_actor, get_renewal_billing
from api.errors import forbidden
from core.application.dtos import RenewalRunDTO
from core.application.services import RenewalBillingService


router = APIRouter()


@router.post(
    "/renewals/run",
    response_model=RenewalRunDTO,
    summary="Run the renewal sweep now",
)
async def run_renewals(
    limit: Optional[int] = Query(default=None, description="Batch size (1-300, default 100)"),
    actor: Actor = Depends(get_actor),
    billing: RenewalBillingService = Depends(get_renewal_billing),
):
    if not actor.is_admin:
        raise forbidden()

    summary = await billing.process_due(limit=limit)
    return RenewalRunDTO.from_summary(summary)
