"""
COMMISSIONS EXCEPTIONS

Domain errors raised by the service layer. They are APIException subclasses
so the API boundary can turn them into the JSON envelope with the right
status code; background jobs classify them by type.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class CommissionsError(APIException):
    """Base exception for commissions business errors"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "A commissions error occurred."
    default_code = "commissions_error"


# ---------------------------------------------------------
# Auth
# ---------------------------------------------------------

class InvalidCredentials(CommissionsError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials."
    default_code = "invalid_credentials"


class InvalidToken(CommissionsError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Token is invalid or expired."
    default_code = "invalid_token"


# ---------------------------------------------------------
# Sales
# ---------------------------------------------------------

class InvalidCommissionData(CommissionsError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Commission data is invalid."
    default_code = "invalid_commission_data"


class InvalidSaleAmount(InvalidCommissionData):
    default_detail = "Sale amount must be greater than zero."
    default_code = "invalid_sale_amount"

    def __init__(self, amount=None):
        detail = None
        if amount is not None:
            detail = f"Sale amount must be greater than zero. Given amount: {amount}"
        super().__init__(detail)


class SaleNotFound(CommissionsError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "sale_not_found"

    def __init__(self, sale_id):
        self.sale_id = sale_id
        super().__init__(f"Sale with ID {sale_id} not found.")


# ---------------------------------------------------------
# Sellers
# ---------------------------------------------------------

class SellerNotFound(CommissionsError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "seller_not_found"

    def __init__(self, seller_id):
        self.seller_id = seller_id
        super().__init__(f"Seller with ID {seller_id} not found.")


class DuplicateSellerEmail(CommissionsError):
    status_code = status.HTTP_409_CONFLICT
    default_code = "duplicate_seller_email"

    def __init__(self, email):
        self.email = email
        super().__init__(f"A seller with email '{email}' already exists.")


# ---------------------------------------------------------
# Jobs
# ---------------------------------------------------------

class DiscardJob(Exception):
    """Raised by a job to stop it without any further retry."""


class EmailNotSent(Exception):
    """Raised by a job when the mail backend reports a failed delivery."""
