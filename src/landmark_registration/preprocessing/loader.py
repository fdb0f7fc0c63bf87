"""
Sensor Report Loader

This module turns text sensor reports into SensorReading objects.

A report is a sequence of blocks separated by blank lines. Each block starts
with a header naming the sensor, followed by one ``x,y,z`` line per landmark:

    --- scanner 0 ---
    404,-588,-901
    528,-643,409
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..geometry.landmark import Landmark
from ..registration.errors import MalformedInputError
from ..registration.sensor import SensorReading
from ..utils.logging import setup_logger

logger = setup_logger(__name__)

Block = List[Tuple[int, str]]


class SensorReportLoader:
    """
    A class for loading sensor reports from text.

    Features:
    - Blank-line separated blocks, one per sensor
    - Header validation (``--- scanner <id> ---``)
    - Line-numbered errors for malformed coordinates
    """

    def load(self, file_path: Union[str, Path]) -> List[SensorReading]:
        """
        Load a sensor report file.

        Args:
            file_path: Path to the report

        Returns:
            Readings in file order

        Raises:
            FileNotFoundError: If the file does not exist
            MalformedInputError: If the report cannot be parsed
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        logger.info(f"Loading sensor report from {file_path}")
        readings = self.parse(file_path.read_text(encoding="utf-8"))
        logger.info(
            f"Loaded {len(readings)} sensors with "
            f"{sum(len(r) for r in readings)} landmark observations"
        )
        return readings

    def parse(self, text: str) -> List[SensorReading]:
        """Parse report text into readings."""
        return [self._parse_block(block) for block in self._split_blocks(text)]

    @staticmethod
    def _split_blocks(text: str) -> List[Block]:
        blocks: List[Block] = []
        current: Block = []
        for line_number, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line:
                if current:
                    blocks.append(current)
                    current = []
                continue
            current.append((line_number, line))
        if current:
            blocks.append(current)
        return blocks

    @staticmethod
    def parse_header(line: str, line_number: Optional[int] = None) -> int:
        """Return the sensor id from a ``--- scanner <id> ---`` header."""
        parts = line.split()
        if len(parts) < 4 or parts[0] != "---" or parts[-1] != "---":
            raise MalformedInputError(f"invalid sensor header: {line!r}", line_number)
        try:
            sensor_id = int(parts[2])
        except ValueError as e:
            raise MalformedInputError(f"invalid sensor id in header: {line!r}", line_number) from e
        if sensor_id < 0:
            raise MalformedInputError(f"negative sensor id in header: {line!r}", line_number)
        return sensor_id

    def _parse_block(self, block: Block) -> SensorReading:
        header_line, header = block[0]
        sensor_id = self.parse_header(header, header_line)

        landmarks = []
        for line_number, line in block[1:]:
            try:
                landmarks.append(Landmark.parse(line))
            except ValueError as e:
                raise MalformedInputError(str(e), line_number) from e

        if not landmarks:
            logger.warning(f"Sensor {sensor_id} reports no landmarks")
        return SensorReading(sensor_id, tuple(landmarks))


def load_sensor_readings(file_path: Union[str, Path]) -> List[SensorReading]:
    return SensorReportLoader().load(file_path)


def parse_sensor_readings(text: str) -> List[SensorReading]:
    return SensorReportLoader().parse(text)
