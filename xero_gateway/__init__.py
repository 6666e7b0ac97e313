"""Xero accounting API records and gateway.

Exposes the ``Payment`` record together with the gateway used to send it.
"""
from .errors import NoGatewayError, XeroApiError
from .payment import GUID_REGEX, Payment
from .gateway import Gateway, GatewayResponse, PaymentGateway

__all__ = [
    "GUID_REGEX",
    "Gateway",
    "GatewayResponse",
    "NoGatewayError",
    "Payment",
    "PaymentGateway",
    "XeroApiError",
]
