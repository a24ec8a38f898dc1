"""Console alerts for signals surfaced by the listener client."""

import sys
from typing import Optional, TextIO

from ..signals.models import Signal
from ..utils.time import parse_timestamp

BANNER_RULE = "=" * 60


def format_signal_alert(signal: Signal) -> str:
    """Render a signal as a multi-line alert banner."""
    try:
        when = parse_timestamp(signal.timestamp).strftime("%Y-%m-%d %H:%M:%S %Z")
    except ValueError:
        when = signal.timestamp

    lines = [
        BANNER_RULE,
        "NEW SIGNAL ALERT",
        "",
        f"Symbol: {signal.symbol}",
    ]
    if signal.market and signal.market != signal.symbol:
        lines.append(f"Market: {signal.market}")
    lines.extend([
        f"Type: {signal.type.value.upper()}",
        f"Price: {signal.entry_price}",
        f"Timeframe: {signal.timeframe.value}",
        f"Time: {when}",
        BANNER_RULE,
    ])
    return "\n".join(lines)


def print_signal_alert(signal: Signal, stream: Optional[TextIO] = None) -> None:
    """Default signal handler: print the alert banner."""
    print(format_signal_alert(signal), file=stream or sys.stdout, flush=True)
