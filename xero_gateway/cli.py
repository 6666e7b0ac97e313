import sys
from pathlib import Path

from common.logging import configure_logging

from .payment import Payment


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: python -m xero_gateway.cli <payment.xml>", file=sys.stderr)
        return 2

    configure_logging(service_name="xero-gateway")
    payment = Payment.from_xml(Path(argv[0]).read_text(encoding="utf-8"))
    if not payment.valid():
        for field_name, message in payment.errors:
            print(f"{field_name}: {message}", file=sys.stderr)
        return 1

    print(payment.to_xml_string())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
