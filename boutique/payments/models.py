# module boutique.payments.models
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class PaymentIntentRequest(BaseModel):
    amount: Any = None
    currency: str = "usd"
    metadata: Dict[str, Any] = Field(default_factory=dict)


class InitializePaymentRequest(BaseModel):
    amount: Any = None
    currency: str = "ngn"
    email: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
