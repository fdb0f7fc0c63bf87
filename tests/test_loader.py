"""
Test suite for the sensor report loader
"""

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from landmark_registration.geometry import Landmark
from landmark_registration.preprocessing import SensorReportLoader, parse_sensor_readings
from landmark_registration.registration import MalformedInputError

EXAMPLE_REPORT = Path(__file__).parent / "sample_data" / "example_report.txt"


class TestSensorReportLoader:
    """Test cases for the SensorReportLoader class."""

    def setup_method(self):
        self.loader = SensorReportLoader()

    def test_load_example_report(self):
        readings = self.loader.load(EXAMPLE_REPORT)

        assert [r.sensor_id for r in readings] == [0, 1, 2, 3, 4]
        assert [len(r) for r in readings] == [25, 25, 26, 25, 26]
        assert readings[0].landmarks[0] == Landmark(404, -588, -901)
        assert readings[4].landmarks[-1] == Landmark(30, -46, -14)
        assert len(readings[2].fingerprint) == 26

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            self.loader.load(tmp_path / "missing.txt")

    def test_parse_tolerates_indentation_and_blank_runs(self):
        text = """

            --- scanner 0 ---
            -1,-1,1
            -2,-2,2


            --- scanner 7 ---
            5,6,-4
        """
        readings = parse_sensor_readings(text)

        assert [r.sensor_id for r in readings] == [0, 7]
        assert readings[0].landmarks == (Landmark(-1, -1, 1), Landmark(-2, -2, 2))
        assert readings[1].landmarks == (Landmark(5, 6, -4),)

    def test_header_only_block_is_an_empty_sensor(self):
        readings = self.loader.parse("--- scanner 3 ---\n")
        assert readings[0].sensor_id == 3
        assert len(readings[0]) == 0

    def test_empty_text(self):
        assert self.loader.parse("") == []

    @pytest.mark.parametrize(
        "header",
        ["--- scanner ---", "scanner 0", "--- scanner x ---", "--- scanner -1 ---", "1,2,3"],
    )
    def test_rejects_malformed_header(self, header):
        with pytest.raises(MalformedInputError):
            self.loader.parse(f"{header}\n1,2,3\n")

    def test_malformed_coordinate_reports_line_number(self):
        text = "--- scanner 0 ---\n1,2,3\n4,five,6\n"
        with pytest.raises(MalformedInputError) as exc_info:
            self.loader.parse(text)

        assert exc_info.value.line_number == 3
        assert "line 3" in str(exc_info.value)
        assert isinstance(exc_info.value, ValueError)

    def test_missing_blank_line_between_blocks(self):
        text = "--- scanner 0 ---\n1,2,3\n--- scanner 1 ---\n4,5,6\n"
        with pytest.raises(MalformedInputError):
            self.loader.parse(text)
