"""Instrument catalog lookups."""

from typing import Optional

from ..config.defaults import CatalogParams

MARKET_KINDS = ("forex", "crypto", "commodities")


class MarketCatalog:
    """Read-only view over the configured instrument catalogs."""

    def __init__(self, params: Optional[CatalogParams] = None):
        self.params = params or CatalogParams()

    def symbols_for(self, kind: str) -> tuple[str, ...]:
        """
        Symbols configured for one market kind.

        Args:
            kind: One of forex, crypto, commodities

        Returns:
            Tuple of symbols, in configuration order

        Raises:
            KeyError: If the market kind is unknown
        """
        if kind not in MARKET_KINDS:
            raise KeyError(f"Unknown market kind: {kind}")
        return tuple(getattr(self.params, kind))

    def all_symbols(self) -> tuple[str, ...]:
        """Union of all catalogs, without duplicates, in catalog order."""
        seen: dict[str, None] = {}
        for kind in MARKET_KINDS:
            for symbol in self.symbols_for(kind):
                seen.setdefault(symbol, None)
        return tuple(seen)

    def kind_of(self, symbol: str) -> Optional[str]:
        """Market kind a symbol belongs to, or None if uncatalogued."""
        for kind in MARKET_KINDS:
            if symbol in self.symbols_for(kind):
                return kind
        return None

    def base_price(self, symbol: str) -> float:
        """Reference price for a symbol, falling back to the default."""
        return float(self.params.base_prices.get(symbol, self.params.default_base_price))

    def market_name(self, symbol: str) -> str:
        """Display name for a symbol, falling back to the raw symbol."""
        return self.params.names.get(symbol, symbol)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.all_symbols()

    def __len__(self) -> int:
        return len(self.all_symbols())
