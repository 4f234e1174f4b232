"""Broker display metadata.

Maps the broker keys used in position records to a display name, country,
and flag emoji. Unknown brokers fall back to their raw name.

Examples::

    >>> format_broker_display("Rakuten")
    '🇯🇵 Rakuten Securities'
    >>> format_broker_display("Fidelity")
    'Fidelity'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BrokerInfo:
    """Display metadata for a single broker."""

    name: str
    country: str
    country_code: str
    flag: str


BROKER_INFO: dict[str, BrokerInfo] = {
    "Rakuten": BrokerInfo(
        name="Rakuten Securities",
        country="Japan",
        country_code="JP",
        flag="🇯🇵",
    ),
    "CreditAgricole": BrokerInfo(
        name="Crédit Agricole",
        country="France",
        country_code="FR",
        flag="🇫🇷",
    ),
}


def get_broker_info(broker_name: Optional[str]) -> Optional[BrokerInfo]:
    """Return the metadata for ``broker_name`` or None when unknown/empty."""
    if not broker_name:
        return None
    return BROKER_INFO.get(broker_name)


def format_broker_display(broker_name: Optional[str]) -> str:
    """Return ``"<flag> <name>"`` for known brokers, the raw name otherwise."""
    if not broker_name:
        return "Unknown"
    info = get_broker_info(broker_name)
    if info is not None:
        return f"{info.flag} {info.name}"
    return broker_name
