"""Payment record exchanged with the Xero accounting API.

A ``Payment`` applies money against an invoice from a bank account. Either
side may be referenced by Xero GUID or by its human key (invoice number,
account code). The record knows how to validate itself, how to render the
``<Payment>`` element the API expects and how to read one back.
"""
from __future__ import annotations

import datetime as _dt
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, fields
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .dates import format_date, parse_date_time
from .errors import NoGatewayError
from .money import format_decimal, parse_decimal, to_decimal

if TYPE_CHECKING:  # pragma: no cover
    from .gateway import GatewayResponse, PaymentGateway

__all__ = ["Payment", "GUID_REGEX", "is_blank"]

_LOG = logging.getLogger(__name__)

GUID_REGEX = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")

# Historical key reported alongside invoice_id; consumers match on it.
INVOICE_NUMBER_ERROR_KEY = "invoice_name"

ValidationError = Tuple[str, str]


def is_blank(value: Any) -> bool:
    """``None`` or an empty / whitespace-only string."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _is_guid(value: str) -> bool:
    return isinstance(value, str) and GUID_REGEX.fullmatch(value) is not None


def _to_date(text: str) -> _dt.date:
    return parse_date_time(text).date()


# tag -> (attribute, converter)
_LEAF_TAGS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "InvoiceID": ("invoice_id", str),
    "InvoiceNumber": ("invoice_number", str),
    "AccountID": ("account_id", str),
    "Code": ("account_code", str),
    "PaymentID": ("payment_id", str),
    "Date": ("date", _to_date),
    "Amount": ("amount", parse_decimal),
    "Reference": ("reference", str),
    "CurrencyRate": ("currency_rate", parse_decimal),
}

_STRING_FIELDS = frozenset(
    {"invoice_id", "invoice_number", "account_id", "account_code", "payment_id", "reference"}
)
_DECIMAL_FIELDS = frozenset({"amount", "currency_rate"})

# containers whose children carry invoice / account references
_NESTED_TAGS = {
    "Invoice": ("InvoiceID", "InvoiceNumber"),
    "Account": ("AccountID", "Code"),
}


@dataclass
class Payment:
    """Single Xero payment.

    Construct with keyword fields; unknown names raise ``TypeError``::

        payment = Payment(invoice_number="INV-1", account_code="200", amount=Decimal("100"))
        payment.valid()     # True / False, details in payment.errors
        payment.create()    # delegates to the attached gateway
    """

    invoice_id: Optional[str] = None
    invoice_number: Optional[str] = None
    account_id: Optional[str] = None
    account_code: Optional[str] = None
    payment_id: Optional[str] = None
    date: Optional[_dt.date] = None
    amount: Optional[Decimal] = None
    reference: Optional[str] = None
    currency_rate: Optional[Decimal] = None

    # not part of identity
    gateway: Optional["PaymentGateway"] = field(default=None, compare=False, repr=False)
    errors: List[ValidationError] = field(default_factory=list, init=False, compare=False, repr=False)

    def __setattr__(self, name: str, value: Any) -> None:
        # keep field values in their wire types so decoded copies compare equal
        if value is not None:
            if name in _STRING_FIELDS:
                value = str(value)
            elif name in _DECIMAL_FIELDS:
                value = to_decimal(value)
            elif name == "date" and isinstance(value, _dt.datetime):
                value = value.date()
        super().__setattr__(name, value)

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> "Payment":
        """Build from a field-name mapping, rejecting unknown keys."""
        allowed = {f.name for f in fields(cls) if f.init}
        unknown = sorted(set(params) - allowed)
        if unknown:
            raise TypeError(f"unknown Payment field(s): {', '.join(unknown)}")
        return cls(**params)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def valid(self) -> bool:
        """Validate against the rules the API enforces.

        Resets ``errors`` and runs every check; returns ``True`` when none
        reported a problem.
        """
        self.errors = []

        self._ensure_invoice_id_is_a_valid_guid_or_blank()
        self._ensure_invoice_id_or_number_is_set()
        self._ensure_account_id_is_a_valid_guid_or_blank()
        self._ensure_account_id_or_code_is_set()

        if self.errors:
            _LOG.debug("payment failed validation: %s", self.errors)
        return not self.errors

    def _ensure_invoice_id_is_a_valid_guid_or_blank(self) -> None:
        if not is_blank(self.invoice_id) and not _is_guid(self.invoice_id):
            self.errors.append(("invoice_id", "must be blank or a valid GUID"))

    def _ensure_invoice_id_or_number_is_set(self) -> None:
        if is_blank(self.invoice_id) and is_blank(self.invoice_number):
            self.errors.append(("invoice_id", "must set an Invoice ID or Number"))
            self.errors.append((INVOICE_NUMBER_ERROR_KEY, "must set an Invoice ID or Number"))

    def _ensure_account_id_is_a_valid_guid_or_blank(self) -> None:
        if not is_blank(self.account_id) and not _is_guid(self.account_id):
            self.errors.append(("account_id", "must be a valid GUID"))

    def _ensure_account_id_or_code_is_set(self) -> None:
        if is_blank(self.account_id) and is_blank(self.account_code):
            self.errors.append(("account_id", "must set an Account ID or Code"))
            self.errors.append(("account_code", "must set an Account ID or Code"))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self) -> "GatewayResponse":
        """Create this payment through the attached gateway."""
        if self.gateway is None:
            raise NoGatewayError()
        return self.gateway.create_payment(self)

    # creating is currently the only write the API allows
    save = create

    # ------------------------------------------------------------------
    # XML
    # ------------------------------------------------------------------

    def to_xml(self, parent: Optional[ET.Element] = None) -> ET.Element:
        """Return the ``<Payment>`` element, appended to *parent* if given."""
        if parent is None:
            root = ET.Element("Payment")
        else:
            root = ET.SubElement(parent, "Payment")

        invoice = ET.SubElement(root, "Invoice")
        if self.invoice_id is not None:
            ET.SubElement(invoice, "InvoiceID").text = self.invoice_id
        if self.invoice_number is not None:
            ET.SubElement(invoice, "InvoiceNumber").text = self.invoice_number

        account = ET.SubElement(root, "Account")
        if self.account_id is not None:
            ET.SubElement(account, "AccountID").text = self.account_id
        if self.account_code is not None:
            ET.SubElement(account, "Code").text = self.account_code

        ET.SubElement(root, "Date").text = format_date(self.date or _dt.date.today())
        if self.amount is not None:
            ET.SubElement(root, "Amount").text = format_decimal(self.amount)
        if self.reference is not None:
            ET.SubElement(root, "Reference").text = self.reference
        if self.currency_rate is not None:
            ET.SubElement(root, "CurrencyRate").text = format_decimal(self.currency_rate)
        return root

    def to_xml_string(self) -> str:
        return ET.tostring(self.to_xml(), encoding="unicode")

    @classmethod
    def from_xml(
        cls,
        payment_element: Union[ET.Element, str, bytes],
        *,
        gateway: Optional["PaymentGateway"] = None,
    ) -> "Payment":
        """Decode a ``<Payment>`` element (or its XML text).

        Unrecognised tags are skipped and nothing is validated.
        """
        if isinstance(payment_element, (str, bytes)):
            payment_element = ET.fromstring(payment_element)

        payment = cls(gateway=gateway)
        for element in payment_element:
            nested = _NESTED_TAGS.get(element.tag)
            if nested is not None:
                for child in element:
                    if child.tag in nested:
                        payment._assign(child)
            elif element.tag in _LEAF_TAGS:
                payment._assign(element)
        return payment

    def _assign(self, element: ET.Element) -> None:
        attr, convert = _LEAF_TAGS[element.tag]
        setattr(self, attr, convert(element.text or ""))
