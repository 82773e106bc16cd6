"""Coordinates Suite: paste coordinates, get UTM and Lat/Lon back."""

__version__ = "0.3.0"
