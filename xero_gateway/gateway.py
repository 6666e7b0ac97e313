"""HTTP gateway for the Xero accounting API (payments subset).

- Bearer token from a pre-supplied string, a provider exposing ``fetch()``,
  or the secrets manager.
- XML request/response bodies built and parsed with ElementTree.
- Prometheus metrics per operation.
- No retries: writes are not idempotent and callers decide how to recover.
"""
from __future__ import annotations

import logging
import time
import uuid
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

import requests
from prometheus_client import Counter, Histogram

from . import config
from .errors import XeroApiError
from .payment import Payment

__all__ = [
    "PaymentGateway",
    "TokenProvider",
    "GatewayResponse",
    "Gateway",
    "parse_response",
]

_LOG = logging.getLogger(__name__)

# --- Prometheus metrics -----------------
_payments_requests_total = Counter(
    "xero_payments_requests_total",
    "Payment calls against the Xero API",
    labelnames=["operation", "result"],
)
_non_2xx_total = Counter("xero_non_2xx_total", "Non-2xx responses from Xero", labelnames=["status_bucket"])
_latency_hist = Histogram(
    "xero_request_latency_seconds",
    "Latency for Xero API requests",
    buckets=(0.1, 0.3, 0.5, 1, 2, 5, 10),
)


@runtime_checkable
class PaymentGateway(Protocol):
    """Anything able to create a payment on behalf of a ``Payment``."""

    def create_payment(self, payment: Payment) -> Any:
        ...


class TokenProvider(Protocol):
    """Return a valid OAuth2 bearer token string."""

    def fetch(self) -> str:
        ...


@dataclass
class GatewayResponse:
    """Parsed ``<Response>`` envelope."""

    status: Optional[str] = None
    response_id: Optional[str] = None
    provider_name: Optional[str] = None
    date_time_utc: Optional[str] = None
    payments: List[Payment] = field(default_factory=list)
    request_xml: Optional[str] = None
    response_xml: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == "OK"

    @property
    def payment(self) -> Optional[Payment]:
        return self.payments[0] if self.payments else None


def _text(root: ET.Element, tag: str) -> Optional[str]:
    elem = root.find(tag)
    if elem is None or elem.text is None:
        return None
    return elem.text.strip()


def parse_response(
    response_xml: str,
    *,
    request_xml: Optional[str] = None,
    gateway: Optional[PaymentGateway] = None,
) -> GatewayResponse:
    """Decode a ``<Response>`` envelope, attaching *gateway* to each payment."""

    root = ET.fromstring(response_xml)
    resp = GatewayResponse(
        status=_text(root, "Status"),
        response_id=_text(root, "Id"),
        provider_name=_text(root, "ProviderName"),
        date_time_utc=_text(root, "DateTimeUTC"),
        request_xml=request_xml,
        response_xml=response_xml,
    )
    for elem in root.findall("./Payments/Payment"):
        resp.payments.append(Payment.from_xml(elem, gateway=gateway))
    return resp


def _api_exception(body: str, status_code: int) -> Optional[XeroApiError]:
    """Return ``XeroApiError`` if *body* is an ``<ApiException>`` document."""
    try:
        root = ET.fromstring(body)
    except ET.ParseError:
        return None
    if root.tag != "ApiException":
        return None

    number = _text(root, "ErrorNumber")
    messages = [
        (m.text or "").strip()
        for m in root.iterfind(".//ValidationErrors/ValidationError/Message")
        if m.text
    ]
    return XeroApiError(
        _text(root, "Message") or "Xero API error",
        error_number=int(number) if number and number.isdigit() else None,
        error_type=_text(root, "Type"),
        validation_errors=messages,
        status_code=status_code,
    )


class Gateway:
    """
    Minimal synchronous client for the Xero accounting API.
    - Automatic bearer from a token provider (or pre-supplied token string).
    - ``xero-tenant-id`` header selects the organisation.
    - XML helpers for the payments endpoints.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        tenant_id: Optional[str] = None,
        token: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        # settings are read only for values the caller left out
        self.base_url = (base_url or config.base_url()).rstrip("/")
        self.tenant_id = tenant_id or config.tenant_id()
        self.timeout = timeout if timeout is not None else config.timeout()
        self.session = session or requests.Session()

        if token_provider is None and token is None:
            token = config.access_token()
        if token_provider is None and not token:
            raise ValueError("Provide either token_provider or token (or set XERO_ACCESS_TOKEN).")
        self._provider = token_provider
        self._token = token

    # --- headers/url builders -------------------------------------------------
    def _bearer(self) -> str:
        if self._provider is not None:
            return self._provider.fetch()
        return self._token or ""

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        h = {
            "Authorization": f"Bearer {self._bearer()}",
            "Accept": "application/xml",
            "Content-Type": "application/xml",
            "X-Request-ID": str(uuid.uuid4()),
        }
        if self.tenant_id:
            h["xero-tenant-id"] = self.tenant_id
        if extra:
            h.update(extra)
        return h

    def _url(self, path: str) -> str:
        path = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{path}"

    # --- core request helper --------------------------------------------------
    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self._url(path)
        headers = self._headers(kwargs.pop("headers", None))
        timeout = kwargs.pop("timeout", self.timeout)
        _LOG.info(
            "%s %s", method, url,
            extra={"endpoint": path, "request_id": headers["X-Request-ID"]},
        )
        resp = self.session.request(method, url, headers=headers, timeout=timeout, **kwargs)
        if not 200 <= resp.status_code < 300:
            _LOG.warning(
                "%s %s -> %s", method, url, resp.status_code,
                extra={"endpoint": path, "request_id": headers["X-Request-ID"]},
            )
            if resp.status_code == 400:
                api_error = _api_exception(resp.text, resp.status_code)
                if api_error is not None:
                    raise api_error
        # Raise for non-2xx; callers handle HTTPError
        resp.raise_for_status()
        return resp

    def _observe(self, operation: str, call, *args) -> GatewayResponse:
        start = time.perf_counter()
        status = "ERR"
        try:
            result = call(*args)
            status = "200"
            return result
        except XeroApiError as e:
            status = str(e.status_code or "ERR")
            raise
        except requests.HTTPError as e:
            try:
                status = str(e.response.status_code)
            except AttributeError:
                status = "ERR"
            raise
        finally:
            _payments_requests_total.labels(
                operation=operation, result=("success" if status == "200" else "error")
            ).inc()
            if status != "200":
                bucket = f"{status[0]}xx" if status[0].isdigit() else status
                _non_2xx_total.labels(status_bucket=bucket).inc()
            _latency_hist.observe(time.perf_counter() - start)

    # --- Payments -------------------------------------------------------------
    def create_payment(self, payment: Payment) -> GatewayResponse:
        """
        PUT /Payments with ``<Payments><Payment>..</Payment></Payments>``.
        """
        return self._observe("create", self._create_payment, payment)

    def _create_payment(self, payment: Payment) -> GatewayResponse:
        envelope = ET.Element("Payments")
        payment.to_xml(envelope)
        request_xml = ET.tostring(envelope, encoding="unicode")
        resp = self.request("PUT", "/Payments", data=request_xml.encode("utf-8"))
        return parse_response(resp.text, request_xml=request_xml, gateway=self)

    def get_payment(self, payment_id: str) -> GatewayResponse:
        """
        GET /Payments/{id}
        """
        return self._observe("get", self._get_payment, payment_id)

    def _get_payment(self, payment_id: str) -> GatewayResponse:
        resp = self.request("GET", f"/Payments/{payment_id}")
        return parse_response(resp.text, gateway=self)

    # --- lifecycle --------------------------------------------------------------
    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
