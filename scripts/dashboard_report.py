"""Print the formatted dashboard summary for the configured transaction file."""

from __future__ import annotations

import argparse
import enum
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from payment_analytics.core.config import get_settings
from payment_analytics.core.logging import configure_logging
from payment_analytics.models import Country, DeclineType, PaymentMethod, Processor
from payment_analytics.services.filter_store import get_filter_store
from payment_analytics.services.reporting import build_dashboard_report

logger = logging.getLogger(__name__)


def _values(choices: type[enum.Enum]) -> list[str]:
    return [member.value for member in choices]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--country", action="append", default=[], choices=_values(Country))
    parser.add_argument(
        "--payment-method", action="append", default=[], choices=_values(PaymentMethod)
    )
    parser.add_argument("--processor", action="append", default=[], choices=_values(Processor))
    parser.add_argument(
        "--decline-type", action="append", default=[], choices=_values(DeclineType)
    )
    parser.add_argument("--output", type=Path, help="Write JSON here instead of stdout")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    configure_logging()
    args = parse_args(argv)
    settings = get_settings()
    logger.info("%s %s building dashboard report", settings.app_name, settings.version)

    store = get_filter_store()
    store.set_countries(args.country)
    store.set_payment_methods(args.payment_method)
    store.set_processors(args.processor)
    store.set_decline_types(args.decline_type)

    report = build_dashboard_report(store.filtered_transactions, settings)
    payload = report.model_dump_json(indent=2)
    if args.output is None:
        print(payload)
    else:
        args.output.write_text(payload, encoding="utf-8")
        print(f"Dashboard report written to {args.output}")


if __name__ == "__main__":
    main()
