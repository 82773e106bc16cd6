import logging
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from coordsuite.config import UTM_HEMISPHERE, UTM_ZONE
from coordsuite.converter import (
    ConversionError,
    EmptyCoordinatesError,
    Hemisphere,
    compute_geo_coords,
    compute_utm_coords,
)
from coordsuite.parsers import ConversionMode, classify, parse_number_pairs
from coordsuite.viewport import derive_viewport

logger = logging.getLogger(__name__)


class Outcome(Enum):
    CONVERTED = "converted"
    EMPTY = "empty"
    FAILED = "failed"


def _no_coords():
    return np.empty((0, 2), dtype=np.float32)


@dataclass
class Session:
    """Conversion state of one user.

    The conversion mode says which list is the source: coords_utm in
    UTM_TO_LATLON mode, coords_geo in LATLON_TO_UTM mode. The other list is
    always recomputed from it, never the other way around.

    Every operation either applies completely or leaves the session as it
    was, and reports which with an Outcome.
    """

    conversion_mode: ConversionMode = ConversionMode.LATLON_TO_UTM
    utm_zone: int = UTM_ZONE
    hemisphere: Hemisphere = field(default_factory=lambda: Hemisphere.parse(UTM_HEMISPHERE))
    coords_geo: np.ndarray = field(default_factory=_no_coords)
    coords_utm: np.ndarray = field(default_factory=_no_coords)

    @property
    def source_coords(self):
        if self.conversion_mode is ConversionMode.UTM_TO_LATLON:
            return self.coords_utm
        return self.coords_geo

    def load_text(self, text):
        """Parse pasted text, guess what it contains and convert it."""
        coords = parse_number_pairs(text or "")
        mode = classify(coords)
        if mode is None:
            logger.info("No coordinate pairs found")
            return Outcome.EMPTY

        if mode is ConversionMode.LATLON_TO_UTM:
            # pasted as "lat lon", kept as [lon, lat]
            coords = coords[:, ::-1].copy()

        outcome = self._apply(mode, coords, self.utm_zone, self.hemisphere)
        logger.info("Read %d point(s) as %s: %s", len(coords), mode, outcome.value)
        return outcome

    def recompute(self):
        """Refresh the dependent list from the source one."""
        return self._apply(self.conversion_mode, self.source_coords, self.utm_zone, self.hemisphere)

    def set_zone(self, zone):
        """Change the UTM zone.

        Only meaningful in UTM_TO_LATLON mode; otherwise the zone follows the
        points and None is returned.
        """
        zone = int(zone)
        if not 1 <= zone <= 60:
            raise ValueError(f"UTM zone must be between 1 and 60, got {zone}")
        if self.conversion_mode is not ConversionMode.UTM_TO_LATLON:
            return None
        return self._apply(self.conversion_mode, self.coords_utm, zone, self.hemisphere)

    def set_hemisphere(self, hemisphere):
        if not isinstance(hemisphere, Hemisphere):
            hemisphere = Hemisphere.parse(hemisphere)
        if self.conversion_mode is not ConversionMode.UTM_TO_LATLON:
            return None
        return self._apply(self.conversion_mode, self.coords_utm, self.utm_zone, hemisphere)

    def set_mode(self, mode):
        """Make the other list the source and recompute from it."""
        if not isinstance(mode, ConversionMode):
            mode = ConversionMode(mode)
        source = self.coords_utm if mode is ConversionMode.UTM_TO_LATLON else self.coords_geo
        return self._apply(mode, source, self.utm_zone, self.hemisphere)

    def viewport(self):
        return derive_viewport(self.coords_geo)

    def _apply(self, mode, source, zone, hemisphere):
        try:
            if mode is ConversionMode.UTM_TO_LATLON:
                coords_utm = source
                coords_geo = compute_geo_coords(source, zone, hemisphere)
            else:
                coords_geo = source
                coords_utm, zone, hemisphere = compute_utm_coords(source)
        except EmptyCoordinatesError:
            # nothing to convert yet, the settings still apply
            self.conversion_mode = mode
            self.utm_zone = zone
            self.hemisphere = hemisphere
            return Outcome.EMPTY
        except ConversionError as e:
            logger.warning("Conversion failed: %s", e)
            return Outcome.FAILED

        self.conversion_mode = mode
        self.coords_geo = coords_geo
        self.coords_utm = coords_utm
        self.utm_zone = zone
        self.hemisphere = hemisphere
        logger.info("Conversion successful (%d point(s), zone %d %s)", len(coords_geo), zone, hemisphere)
        return Outcome.CONVERTED
