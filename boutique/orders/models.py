# module boutique.orders.models
"""Schémas d'entrée de POST /api/orders (noms de champs camelCase côté client)."""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "paid", "failed", "refunded")


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class OrderLine(_CamelModel):
    id: str
    name: str = ""
    brand: str = ""
    price: float = Field(ge=0)
    sale_price: Optional[float] = Field(default=None, alias="salePrice")
    image: str = ""
    sku: str = ""
    quantity: int = Field(ge=1)

    @property
    def unit_price(self) -> float:
        return self.sale_price if self.sale_price is not None else self.price


class AccountData(_CamelModel):
    email: str
    password: str
    full_name: Optional[str] = Field(default=None, alias="fullName")


class CreateOrderRequest(_CamelModel):
    items: List[OrderLine] = Field(default_factory=list)
    billing_address: Dict[str, Any] = Field(default_factory=dict, alias="billingAddress")
    shipping_address: Optional[Dict[str, Any]] = Field(default=None, alias="shippingAddress")
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")
    payment_reference: Optional[str] = Field(default=None, alias="paymentReference")
    subtotal: float
    tax_amount: float = Field(alias="taxAmount")
    shipping_amount: float = Field(alias="shippingAmount")
    total_amount: float = Field(alias="totalAmount")
    guest_email: Optional[str] = Field(default=None, alias="guestEmail")
    create_account: bool = Field(default=False, alias="createAccount")
    account_data: Optional[AccountData] = Field(default=None, alias="accountData")
