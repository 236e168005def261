"""Display formatting for network statistics (en-US conventions)."""

from __future__ import annotations

from typing import Any


def _locale(value: float) -> str:
    """Group thousands and keep at most three fraction digits."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def _plain(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def format_market_cap(usd: float) -> str:
    if usd >= 1e9:
        return f"${usd / 1e9:.2f}B"
    if usd >= 1e6:
        return f"${usd / 1e6:.2f}M"
    return f"${_locale(usd)}"


def format_currency(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_number(num: float) -> str:
    if num >= 1e9:
        return f"{num / 1e9:.2f}B"
    if num >= 1e6:
        return f"{num / 1e6:.2f}M"
    if num >= 1e3:
        return f"{num / 1e3:.1f}K"
    return _locale(num)


def format_hashrate(hashrate: str | float) -> str:
    """Scale a hashes-per-second figure to TH/s, GH/s or MH/s."""
    try:
        num = float(hashrate)
    except (TypeError, ValueError):
        num = 0.0
    if num >= 1e12:
        return f"{num / 1e12:.2f} TH/s"
    if num >= 1e9:
        return f"{num / 1e9:.2f} GH/s"
    if num >= 1e6:
        return f"{num / 1e6:.2f} MH/s"
    return f"{_plain(num)} H/s"


def _num(data: dict[str, Any], name: str) -> float:
    value = data.get(name)
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def metrics_from_stats(stats: dict[str, Any] | None) -> list[dict[str, Any]]:
    """Headline metric cards for a stats envelope.

    Each card is ``{title, value, change, icon}``; ``icon`` names the asset
    the dashboard renders next to it. An envelope without ``data`` yields
    no cards.
    """
    if not stats or not stats.get("data"):
        return []

    data: dict[str, Any] = stats["data"]
    changes: dict[str, Any] = stats.get("changes") or {}

    def change(name: str) -> float:
        return changes.get(name) or 0

    return [
        {
            "title": "Market Cap",
            "value": format_market_cap(_num(data, "market_cap_usd")),
            "change": change("market_cap_usd"),
            "icon": "market_cap",
        },
        {
            "title": "24h Transactions",
            "value": _locale(_num(data, "transactions_24h")),
            "change": change("transactions_24h"),
            "icon": "transparency",
        },
        {
            "title": "Market Price (USD)",
            "value": format_currency(_num(data, "market_price_usd")),
            "change": change("market_price_usd"),
            "icon": "market_price",
        },
        {
            "title": "24h Volume",
            "value": format_market_cap(_num(data, "volume_24h")),
            "change": change("volume_24h"),
            "icon": "shielded",
        },
        {
            # USD change stands in for the BTC price change.
            "title": "Market Price (BTC)",
            "value": f"₿{_num(data, 'market_price_btc'):.8f}",
            "change": change("market_price_usd"),
            "icon": "market_price_btc",
        },
        {
            "title": "Circulation",
            "value": f"{format_number(_num(data, 'circulation'))} ZEC",
            "change": 0,
            "icon": "circulation",
        },
        {
            "title": "Blocks",
            "value": _locale(_num(data, "blocks")),
            "change": change("blocks_24h"),
            "icon": "blocks",
        },
    ]
