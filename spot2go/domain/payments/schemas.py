from typing import Optional

from pydantic import BaseModel


class PaymentIntentCreate(BaseModel):
    amount: Optional[float] = None
    currency: str = "cad"


class PaymentIntentResponse(BaseModel):
    clientSecret: str
    paymentIntentId: str
    amount: int
    currency: str


class WebhookAck(BaseModel):
    received: bool
