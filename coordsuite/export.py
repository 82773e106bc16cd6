import numpy as np

KML_HEADER = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2"><Document>
<name>Coordinates</name>
"""
KML_FOOTER = "</Document></kml>\n"

LATLON_COLUMNS = ("Latitude", "Longitude")
UTM_COLUMNS = ("Easting", "Northing")


def _pairs(coords):
    return np.asarray(coords, dtype=np.float32).reshape(-1, 2)


def fmt(value):
    """Shortest plain decimal text that reads back to the same float32."""
    return np.format_float_positional(value, unique=True, trim="-")


def _latlon_rows(coords_geo):
    # stored as [lon, lat], written as lat, lon
    return [f"{fmt(lat)}\t{fmt(lon)}" for lon, lat in _pairs(coords_geo)]


def _utm_rows(coords_utm):
    return [f"{fmt(x)}\t{fmt(y)}" for x, y in _pairs(coords_utm)]


def _csv(columns, rows):
    lines = ["\t".join(columns), *rows]
    return "".join(line + "\n" for line in lines).encode("utf-8")


def latlon_csv(coords_geo):
    return _csv(LATLON_COLUMNS, _latlon_rows(coords_geo))


def utm_csv(coords_utm):
    return _csv(UTM_COLUMNS, _utm_rows(coords_utm))


def latlon_tsv(coords_geo):
    """Lat/Lon rows ready to paste into a spreadsheet."""
    return "\n".join(_latlon_rows(coords_geo))


def utm_tsv(coords_utm):
    return "\n".join(_utm_rows(coords_utm))


def point_kml(lon, lat):
    return f"""<Placemark>
  <Point>
    <coordinates>{fmt(lon)},{fmt(lat)},0</coordinates>
  </Point>
</Placemark>
"""


def kml_document(coords_geo):
    kml = KML_HEADER
    for lon, lat in _pairs(coords_geo):
        kml += point_kml(lon, lat)
    kml += KML_FOOTER
    return kml.encode("utf-8")


def points_table(coords_geo, coords_utm):
    """Side by side Lat/Lon and UTM table, one line per point."""
    lines = [f"{'Latitude':>10} {'Longitude':>11}   {'Easting':>8} {'Northing':>9}"]
    for (lon, lat), (x, y) in zip(_pairs(coords_geo), _pairs(coords_utm)):
        lines.append(f"{lat:>10.5f} {lon:>11.5f}   {int(x):>8d} {int(y):>9d}")
    return "\n".join(lines)
