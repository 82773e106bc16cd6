import xml.etree.ElementTree as ET

import numpy as np

from coordsuite.export import (
    kml_document, latlon_csv, latlon_tsv, points_table, utm_csv, utm_tsv
)

KML_NS = {"kml": "http://www.opengis.net/kml/2.2"}

GEO = np.array([[-0.87, 41.65], [2.0, 45.0]], dtype=np.float32)
UTM = np.array([[675870.5, 4613360.0], [421184.7, 4983436.5]], dtype=np.float32)


def test_empty_csv_is_header_only():
    assert latlon_csv([]) == b"Latitude\tLongitude\n"
    assert utm_csv([]) == b"Easting\tNorthing\n"


def test_latlon_csv_writes_lat_first():
    assert latlon_csv(GEO) == b"Latitude\tLongitude\n41.65\t-0.87\n45\t2\n"


def test_utm_csv():
    lines = utm_csv(UTM).decode("utf-8").splitlines()
    assert lines[0] == "Easting\tNorthing"
    assert lines[1] == "675870.5\t4613360"
    assert len(lines) == 3


def test_tsv_has_no_header():
    assert latlon_tsv(GEO) == "41.65\t-0.87\n45\t2"
    assert utm_tsv(UTM[:1]) == "675870.5\t4613360"
    assert latlon_tsv([]) == ""


def test_kml_document():
    root = ET.fromstring(kml_document(GEO))
    assert root.tag == "{http://www.opengis.net/kml/2.2}kml"
    assert root.find("kml:Document/kml:name", KML_NS).text == "Coordinates"

    coordinates = [
        el.text for el in root.findall("kml:Document/kml:Placemark/kml:Point/kml:coordinates", KML_NS)
    ]
    assert coordinates == ["-0.87,41.65,0", "2,45,0"]


def test_empty_kml_is_valid():
    root = ET.fromstring(kml_document([]))
    assert root.findall("kml:Document/kml:Placemark", KML_NS) == []


def test_points_table():
    lines = points_table(GEO, UTM).splitlines()
    assert len(lines) == 3
    assert "Latitude" in lines[0] and "Northing" in lines[0]
    assert "41.65000" in lines[1]
    assert "-0.87000" in lines[1]
    assert "675870" in lines[1] and "4613360" in lines[1]


def test_numbers_are_never_in_exponent_form():
    assert utm_csv([[1_234_567.0, 9_999_999.0]]) == b"Easting\tNorthing\n1234567\t9999999\n"
    assert latlon_csv([[0.00001, -0.000025]]) == b"Latitude\tLongitude\n-0.000025\t0.00001\n"
    assert utm_tsv(UTM[1:]) == "421184.7\t4983436.5"
