"""
Country coordinates used to place users on the map.

Keys are lower-case country names, values are (longitude, latitude).
A user whose location is not in this table is simply not drawn.
"""

from typing import Optional


COUNTRY_COORDINATES = {
    "albania": (20.1683, 41.1533),
    "china": (104.1954, 35.8617),
    "czech republic": (15.473, 49.8175),
    "ecuador": (-78.1834, -1.8312),
    "ethiopia": (40.4897, 9.145),
    "greece": (21.8243, 39.0742),
    "italy": (12.5674, 41.8719),
    "japan": (138.2529, 36.2048),
    "malaysia": (101.9758, 4.2105),
    "mexico": (-102.5528, 23.6345),
    "morocco": (-7.0926, 31.7917),
    "peru": (-75.0152, -9.19),
    "philippines": (121.774, 12.8797),
    "poland": (19.1451, 51.9194),
    "russia": (105.3188, 61.524),
    "slovenia": (14.9955, 46.1512),
    "thailand": (100.9925, 15.87),
}


def coordinates_for(location: Optional[str]) -> Optional[tuple[float, float]]:
    """Case-insensitive lookup; None for unknown or missing locations."""
    if not isinstance(location, str) or not location.strip():
        return None
    return COUNTRY_COORDINATES.get(location.strip().lower())
