from dataclasses import dataclass

import numpy as np

from coordsuite.config import DEFAULT_LAT, DEFAULT_LON, SINGLE_POINT_ZOOM, VIEWPORT_PADDING

# Degrees covered by one tile at zoom levels 0..20
# https://wiki.openstreetmap.org/wiki/Zoom_levels
TILE_WIDTHS = (
    360.0, 180.0, 90.0, 45.0, 22.5, 11.25, 5.625, 2.813, 1.406, 0.703, 0.352,
    0.176, 0.088, 0.044, 0.022, 0.011, 0.005, 0.003, 0.001, 0.0005, 0.00025,
)


@dataclass(frozen=True)
class Viewport:
    center: tuple  # (longitude, latitude)
    zoom: int

    @property
    def longitude(self):
        return self.center[0]

    @property
    def latitude(self):
        return self.center[1]


def zoom_level(coords_geo):
    """Deepest zoom whose tile still spans all the points (padded)."""
    coords_geo = np.asarray(coords_geo, dtype=np.float32).reshape(-1, 2)
    if len(coords_geo) == 0:
        return 0
    if len(coords_geo) == 1:
        return SINGLE_POINT_ZOOM

    lon_range, lat_range = (coords_geo.max(axis=0) - coords_geo.min(axis=0)).tolist()
    extent = VIEWPORT_PADDING * max(lat_range, lon_range)

    # Stops at the last tile wider than the extent, one level shallower than
    # picking the first tile narrower than it, so the padded box always fits.
    zoom = 0
    for i, width in enumerate(TILE_WIDTHS):
        if extent < width:
            zoom = i
        else:
            break
    return zoom


def center(coords_geo):
    coords_geo = np.asarray(coords_geo, dtype=np.float32).reshape(-1, 2)
    if len(coords_geo) == 0:
        return DEFAULT_LON, DEFAULT_LAT
    lon, lat = coords_geo.astype(np.float64).mean(axis=0).tolist()
    return lon, lat


def derive_viewport(coords_geo):
    return Viewport(center=center(coords_geo), zoom=zoom_level(coords_geo))


def map_url(viewport):
    return (
        f"https://www.openstreetmap.org/#map={viewport.zoom}/"
        f"{viewport.latitude:.5f}/{viewport.longitude:.5f}"
    )
