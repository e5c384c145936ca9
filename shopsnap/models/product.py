"""
Product Model
"""
from dataclasses import dataclass, field
from typing import Dict, Optional

# Supermarket chains with tracked shelf prices, in display order
SUPERMARKET_CHAINS = {
    'tesco': "Tesco",
    'sainsburys': "Sainsbury's",
    'asda': "ASDA",
    'morrisons': "Morrisons",
}


@dataclass
class Product:
    """A catalogue product with per-chain shelf prices (GBP)."""

    id: Optional[int] = None
    name: str = ""
    category: str = ""
    prices: Dict[str, Optional[float]] = field(default_factory=dict)

    def price_at(self, chain: str) -> Optional[float]:
        price = self.prices.get(chain)
        return price if price else None

    def to_dict(self) -> dict:
        """Convert product to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'prices': {chain: self.prices.get(chain) for chain in SUPERMARKET_CHAINS},
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Product':
        """Create a Product instance from a dictionary."""
        raw_prices = data.get('prices') or {}
        prices = {}
        for chain in SUPERMARKET_CHAINS:
            value = raw_prices.get(chain, data.get(f'{chain}_price'))
            prices[chain] = float(value) if value is not None else None
        return cls(
            id=data.get('id'),
            name=data.get('name', ''),
            category=data.get('category', ''),
            prices=prices,
        )
