"""
Taxonomie d'erreurs de la boutique.
Chaque erreur porte un code HTTP et un message présentable à l'utilisateur;
le détail technique reste dans les logs (voir app_setup.exceptions).
"""
from typing import Optional


class StorefrontError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None):
        self.message = message or self.default_message
        # detail: information interne, jamais renvoyée au client
        self.detail = detail
        super().__init__(detail or self.message)


class ValidationError(StorefrontError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationRequiredError(StorefrontError):
    status_code = 401
    default_message = "Authentication required"


class NotFoundError(StorefrontError):
    status_code = 404
    default_message = "Not found"


class SignatureVerificationError(StorefrontError):
    status_code = 400
    default_message = "Invalid signature"


class AccountCreationError(StorefrontError):
    status_code = 500
    default_message = "Failed to create account"


class PersistenceError(StorefrontError):
    status_code = 500
    default_message = "Internal server error"


class UpstreamGatewayError(StorefrontError):
    status_code = 502
    default_message = "Payment gateway unavailable"
