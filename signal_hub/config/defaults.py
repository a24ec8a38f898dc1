"""Default configuration parameters for the signal hub."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ServerParams:
    """WebSocket endpoint parameters."""
    host: str = "0.0.0.0"
    port: int = 8080
    path: str = "/"                                  # Requests to other paths get 404
    welcome_message: str = "Welcome to the trading signal channel"


@dataclass(frozen=True)
class GeneratorParams:
    """Periodic demo signal generator parameters."""
    enabled: bool = True
    interval_seconds: float = 30.0                   # Tick period
    emit_probability: float = 0.2                    # Chance a tick emits a signal
    price_jitter_pct: float = 0.005                  # +/- perturbation around base price
    timeframe: str = "D1"                            # Timeframe of generated signals


@dataclass(frozen=True)
class ClientParams:
    """Reconnecting listener client parameters."""
    url: str = "ws://localhost:8080"
    client_name: str = "test_client"
    keepalive_interval_seconds: float = 30.0         # Ping period while connected
    reconnect_delay_seconds: float = 5.0             # Fixed delay, no backoff growth


@dataclass(frozen=True)
class CatalogParams:
    """Instrument catalogs with base prices and display names."""
    forex: tuple[str, ...] = ("EUR/USD", "GBP/JPY", "USD/CAD", "AUD/USD")
    crypto: tuple[str, ...] = ("BTC/USD", "ETH/USD")
    commodities: tuple[str, ...] = ("XAU/USD", "OIL/USD")
    default_base_price: float = 100.0
    base_prices: dict[str, float] = field(default_factory=lambda: {
        "EUR/USD": 1.09,
        "GBP/JPY": 176.50,
        "USD/CAD": 1.35,
        "AUD/USD": 0.65,
        "BTC/USD": 60000.0,
        "ETH/USD": 2500.0,
        "XAU/USD": 1900.0,
        "OIL/USD": 75.0,
    })
    names: dict[str, str] = field(default_factory=lambda: {
        "EUR/USD": "Euro / US Dollar",
        "GBP/JPY": "British Pound / Japanese Yen",
        "USD/CAD": "US Dollar / Canadian Dollar",
        "AUD/USD": "Australian Dollar / US Dollar",
        "BTC/USD": "Bitcoin / US Dollar",
        "ETH/USD": "Ethereum / US Dollar",
        "XAU/USD": "Gold / US Dollar",
        "OIL/USD": "Crude Oil / US Dollar",
    })


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class HubConfig:
    """Complete configuration."""
    server: ServerParams
    generator: GeneratorParams
    client: ClientParams
    catalog: CatalogParams
    logging: LoggingParams


def get_default_config() -> HubConfig:
    """Get the default configuration instance."""
    return HubConfig(
        server=ServerParams(),
        generator=GeneratorParams(),
        client=ClientParams(),
        catalog=CatalogParams(),
        logging=LoggingParams(),
    )
