import logging
import math
from enum import Enum
from functools import lru_cache

import numpy as np
import pyproj
from pyproj.exceptions import ProjError

from coordsuite.config import MAX_EASTING, MAX_NORTHING, MIN_EASTING

logger = logging.getLogger(__name__)


class Hemisphere(Enum):
    NORTH = "North"
    SOUTH = "South"

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, text):
        """Read "N", "north", "S", "South"... into a Hemisphere."""
        key = str(text).strip().lower()
        if key in ("n", "north"):
            return cls.NORTH
        if key in ("s", "south"):
            return cls.SOUTH
        raise ValueError(f"Unknown hemisphere: {text!r}")


class ConversionError(Exception):
    """A batch of coordinates could not be converted."""


class EmptyCoordinatesError(ConversionError):
    """There was nothing to convert."""


def zone_number(latitude, longitude):
    """UTM zone for a point, including the Norway and Svalbard exceptions."""
    if 56.0 <= latitude < 64.0 and 3.0 <= longitude < 12.0:
        return 32

    if 72.0 <= latitude <= 84.0 and longitude >= 0.0:
        if longitude < 9.0:
            return 31
        if longitude < 21.0:
            return 33
        if longitude < 33.0:
            return 35
        if longitude < 42.0:
            return 37

    return int(math.floor((longitude + 180.0) / 6.0)) % 60 + 1


def hemisphere_for(latitude):
    return Hemisphere.NORTH if latitude >= 0.0 else Hemisphere.SOUTH


@lru_cache(maxsize=None)
def utm_proj(zone, hemisphere):
    params = dict(proj="utm", zone=zone, ellps="WGS84")
    if hemisphere is Hemisphere.SOUTH:
        params["south"] = True
    return pyproj.Proj(**params)


def _as_pairs(coords):
    return np.asarray(coords, dtype=np.float32).reshape(-1, 2)


def compute_geo_coords(coords_utm, zone, hemisphere):
    """Convert [easting, northing] pairs to [longitude, latitude].

    All points must be valid for the given zone, otherwise nothing is
    returned and ConversionError is raised.
    """
    coords_utm = _as_pairs(coords_utm)
    if len(coords_utm) == 0:
        raise EmptyCoordinatesError("No UTM coordinates to convert")

    zone = int(zone)
    if not 1 <= zone <= 60:
        raise ConversionError(f"Invalid UTM zone: {zone}")

    easting = coords_utm[:, 0].astype(np.float64)
    northing = coords_utm[:, 1].astype(np.float64)

    bad = ~(np.isfinite(easting) & np.isfinite(northing))
    bad |= (easting < MIN_EASTING) | (easting >= MAX_EASTING)
    bad |= (northing < 0.0) | (northing > MAX_NORTHING)
    if bad.any():
        i = int(np.argmax(bad))
        raise ConversionError(
            f"Point {i + 1} ({easting[i]}, {northing[i]}) is outside the UTM grid"
        )

    try:
        lon, lat = utm_proj(zone, hemisphere)(easting, northing, inverse=True, errcheck=True)
    except ProjError as e:
        raise ConversionError(f"Inverse projection failed: {e}") from e

    coords_geo = np.column_stack([lon, lat])
    if not np.isfinite(coords_geo).all():
        raise ConversionError("Inverse projection produced invalid coordinates")

    return coords_geo.astype(np.float32)


def compute_utm_coords(coords_geo):
    """Convert [longitude, latitude] pairs to [easting, northing].

    Zone and hemisphere come from the first point and every point is
    projected into that zone. Returns (coords_utm, zone, hemisphere).
    """
    coords_geo = _as_pairs(coords_geo)
    if len(coords_geo) == 0:
        raise EmptyCoordinatesError("No Lat/Lon coordinates to convert")

    lon0, lat0 = float(coords_geo[0][0]), float(coords_geo[0][1])
    zone = zone_number(lat0, lon0)
    hemisphere = hemisphere_for(lat0)
    logger.debug("Using UTM zone %d%s from first point", zone, str(hemisphere)[0])

    lon = coords_geo[:, 0].astype(np.float64)
    lat = coords_geo[:, 1].astype(np.float64)
    try:
        easting, northing = utm_proj(zone, hemisphere)(lon, lat, errcheck=True)
    except ProjError as e:
        raise ConversionError(f"Projection failed: {e}") from e

    coords_utm = np.column_stack([easting, northing])
    if not np.isfinite(coords_utm).all():
        raise ConversionError("Projection produced invalid coordinates")

    return coords_utm.astype(np.float32), zone, hemisphere
