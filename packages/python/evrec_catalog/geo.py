import math

from evrec_core.config import EARTH_RADIUS_KM

from .schemas import GeoPoint


# great-circle distance in km; unknown points are infinitely far apart
def distance_km(a: GeoPoint | None, b: GeoPoint | None) -> float:
    if a is None or b is None or not a.known or not b.known:
        return math.inf

    lat1, lng1 = math.radians(a.latitude), math.radians(a.longitude)
    lat2, lng2 = math.radians(b.latitude), math.radians(b.longitude)
    h = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def inverse_distance(km: float) -> float:
    # 1 for co-located points, -> 0 as distance grows, 0 for unknown (inf)
    return 1.0 / (km + 1.0)
