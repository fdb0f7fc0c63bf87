"""
Preprocessing Module

Parsing of text sensor reports into SensorReading objects.
"""

from .loader import SensorReportLoader, load_sensor_readings, parse_sensor_readings

__all__ = [
    "SensorReportLoader",
    "load_sensor_readings",
    "parse_sensor_readings",
]
