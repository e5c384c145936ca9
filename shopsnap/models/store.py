"""
Store Model
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class Store:
    """A physical supermarket branch."""

    id: Optional[int] = None
    name: str = ""
    chain: str = ""
    address: str = ""
    postcode: str = ""
    phone: Optional[str] = None
    latitude: float = 0.0
    longitude: float = 0.0
    opening_hours: str = ""

    def to_dict(self) -> dict:
        """Convert store to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'chain': self.chain,
            'address': self.address,
            'postcode': self.postcode,
            'phone': self.phone,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'opening_hours': self.opening_hours,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Store':
        """Create a Store instance from a dictionary."""
        return cls(
            id=data.get('id'),
            name=data.get('name', ''),
            chain=data.get('chain', ''),
            address=data.get('address', ''),
            postcode=data.get('postcode', ''),
            phone=data.get('phone'),
            latitude=float(data.get('latitude', 0.0)),
            longitude=float(data.get('longitude', 0.0)),
            opening_hours=data.get('opening_hours', data.get('openingHours', '')),
        )
