"""Payment router - Mocked checkout endpoints"""

from fastapi import APIRouter, Depends, Request

from ...auth import require_role
from ...config import STRIPE_WEBHOOK_SECRET
from ...models import Role
from ...schemas import TokenClaims
from ...webhook_security import verify_stripe_webhook
from . import service
from .schemas import PaymentIntentCreate, PaymentIntentResponse, WebhookAck

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/create-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    data: PaymentIntentCreate,
    current_user: TokenClaims = Depends(require_role(Role.CUSTOMER)),
):
    return service.create_payment_intent(data.amount, data.currency, current_user.id)


@router.post("/webhook", response_model=WebhookAck)
async def payment_webhook(request: Request):
    """Signed provider callback. Verified and logged only."""
    raw_body = await verify_stripe_webhook(request, STRIPE_WEBHOOK_SECRET)
    service.handle_event(service.parse_event(raw_body))
    return WebhookAck(received=True)
