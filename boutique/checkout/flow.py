"""
Checkout multi-étapes (machine à états):
    CONTACT_BILLING -> SHIPPING -> PAYMENT -> REVIEW -> SUBMITTED

- Chaque transition valide l'étape courante (champs requis non vides).
- « same as billing »: au moment où la case est cochée, les champs de livraison
  sont recopiés depuis la facturation; tant qu'elle reste cochée, chaque saisie
  billing_* est recopiée vers le champ shipping_* correspondant.
- Le format carte (numéro, expiration, CVV) n'est pas vérifié ici: la passerelle
  de paiement fait foi.
- submit(): revalide les étapes dans l'ordre, construit la commande, l'envoie
  au collaborateur submit_order; en cas de succès le panier est vidé et l'état
  passe à SUBMITTED, sinon l'état reste REVIEW et l'erreur est exposée.
"""
from dataclasses import dataclass, fields
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional
import logging

from boutique.cart.store import CartStore
from boutique.utils.errors import StorefrontError, ValidationError
from .totals import compute_totals

logger = logging.getLogger(__name__)

CONFIRMATION_PATH = "/checkout/success"


class CheckoutStep(IntEnum):
    CONTACT_BILLING = 1
    SHIPPING = 2
    PAYMENT = 3
    REVIEW = 4
    SUBMITTED = 5


ADDRESS_FIELDS = ("first_name", "last_name", "company", "address1", "address2", "city", "state", "zip", "country")
REQUIRED_ADDRESS_FIELDS = ("first_name", "last_name", "address1", "city", "state", "zip")


@dataclass
class CheckoutForm:
    # Contact
    email: str = ""
    phone: str = ""

    # Facturation
    billing_first_name: str = ""
    billing_last_name: str = ""
    billing_company: str = ""
    billing_address1: str = ""
    billing_address2: str = ""
    billing_city: str = ""
    billing_state: str = ""
    billing_zip: str = ""
    billing_country: str = "United States"

    # Livraison
    shipping_first_name: str = ""
    shipping_last_name: str = ""
    shipping_company: str = ""
    shipping_address1: str = ""
    shipping_address2: str = ""
    shipping_city: str = ""
    shipping_state: str = ""
    shipping_zip: str = ""
    shipping_country: str = "United States"

    # Options
    same_as_billing: bool = True
    create_account: bool = False
    password: str = ""
    confirm_password: str = ""

    # Paiement
    payment_method: str = "credit-card"
    card_number: str = ""
    expiry_date: str = ""
    cvv: str = ""
    card_name: str = ""

    def address(self, prefix: str) -> Dict[str, str]:
        data = {_camel(name): getattr(self, f"{prefix}_{name}") for name in ADDRESS_FIELDS}
        if prefix == "billing":
            data["email"] = self.email
            data["phone"] = self.phone
        return data


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


_FIELD_NAMES = {f.name for f in fields(CheckoutForm)}
_BOOL_FIELDS = {"same_as_billing", "create_account"}
_TRUE_VALUES = {"1", "true", "on", "yes"}
_FALSE_VALUES = {"0", "false", "off", "no", ""}


def _as_bool(value: Any) -> bool:
    """Case à cocher: bool, ou sa forme texte issue d'un formulaire."""
    if isinstance(value, bool):
        return value
    text = str(value if value is not None else "").strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid checkbox value: {value!r}")


OrderSubmitter = Callable[[Dict[str, Any]], Dict[str, Any]]


class CheckoutFlow:
    def __init__(self, cart: CartStore, submit_order: OrderSubmitter, form: Optional[CheckoutForm] = None):
        self.cart = cart
        self.submit_order = submit_order
        self.form = form or CheckoutForm()
        self.step = CheckoutStep.CONTACT_BILLING
        self.error: Optional[str] = None
        self.order: Optional[Dict[str, Any]] = None
        self.redirect_to: Optional[str] = None

    # --- saisie ---

    def update(self, field: str, value: Any) -> None:
        if field not in _FIELD_NAMES:
            raise ValueError(f"Unknown checkout field: {field}")
        if field in _BOOL_FIELDS:
            value = _as_bool(value)
        if field == "same_as_billing":
            self.set_same_as_billing(value)
            return
        setattr(self.form, field, value)
        if self.form.same_as_billing and field.startswith("billing_"):
            setattr(self.form, "shipping_" + field[len("billing_"):], value)

    def set_same_as_billing(self, checked: bool) -> None:
        self.form.same_as_billing = checked
        if checked:
            for name in ADDRESS_FIELDS:
                setattr(self.form, f"shipping_{name}", getattr(self.form, f"billing_{name}"))

    # --- validation ---

    def missing_fields(self, step: CheckoutStep) -> List[str]:
        form = self.form
        if step == CheckoutStep.CONTACT_BILLING:
            required = ["email"] + [f"billing_{n}" for n in REQUIRED_ADDRESS_FIELDS]
        elif step == CheckoutStep.SHIPPING:
            if form.same_as_billing:
                return []
            required = [f"shipping_{n}" for n in REQUIRED_ADDRESS_FIELDS]
        elif step == CheckoutStep.PAYMENT:
            required = ["card_name", "card_number", "expiry_date", "cvv"]
        else:
            return []
        return [name for name in required if not str(getattr(form, name) or "").strip()]

    # --- transitions ---

    def next(self) -> CheckoutStep:
        if self.step >= CheckoutStep.REVIEW:
            return self.step
        missing = self.missing_fields(self.step)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        if self.step == CheckoutStep.SHIPPING and self.form.same_as_billing:
            self.set_same_as_billing(True)
        self.step = CheckoutStep(self.step + 1)
        return self.step

    def previous(self) -> CheckoutStep:
        if CheckoutStep.CONTACT_BILLING < self.step < CheckoutStep.SUBMITTED:
            self.step = CheckoutStep(self.step - 1)
        return self.step

    # --- soumission ---

    def build_order_request(self) -> Dict[str, Any]:
        form = self.form
        totals = compute_totals(self.cart.total)
        billing = form.address("billing")
        shipping = billing if form.same_as_billing else form.address("shipping")
        payload: Dict[str, Any] = {
            "items": [item.to_order_line() for item in self.cart.items],
            "billingAddress": billing,
            "shippingAddress": shipping,
            "paymentMethod": form.payment_method,
            "guestEmail": form.email,
            "createAccount": form.create_account,
            **totals.as_payload(),
        }
        if form.create_account:
            payload["accountData"] = {
                "email": form.email,
                "password": form.password,
                "fullName": f"{form.billing_first_name} {form.billing_last_name}".strip(),
            }
        return payload

    def submit(self) -> Dict[str, Any]:
        if self.step != CheckoutStep.REVIEW:
            raise ValidationError("Checkout is not ready for submission")
        for step in (CheckoutStep.CONTACT_BILLING, CheckoutStep.SHIPPING, CheckoutStep.PAYMENT):
            missing = self.missing_fields(step)
            if missing:
                self.step = step
                raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        if self.cart.is_empty:
            raise ValidationError("Your cart is empty")
        if self.form.create_account and (not self.form.password or self.form.password != self.form.confirm_password):
            raise ValidationError("Passwords do not match")

        self.error = None
        try:
            order = self.submit_order(self.build_order_request())
        except StorefrontError as e:
            self.error = e.message
            logger.warning("checkout.submit failed: %s", e)
            raise
        except Exception as e:
            logger.exception("checkout.submit failed")
            self.error = "Order processing failed. Please try again."
            raise StorefrontError(self.error, detail=str(e)) from e

        self.order = order
        self.cart.clear()
        self.step = CheckoutStep.SUBMITTED
        self.redirect_to = CONFIRMATION_PATH
        return order
