"""Port interfaces for span type assignment.

These are abstract interfaces (ports) that define how the domain
interacts with external systems. Concrete implementations (adapters)
are provided in the adapters module.

This follows the Hexagonal Architecture pattern.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Union

from .entities import Device, LineType, Rule


class IDeviceStore(ABC):
    """Port for the driver's device attribute store.

    Implementations might read sysfs, an in-memory snapshot, etc.
    """

    @abstractmethod
    def enumerate_devices(self, selection: Optional[Sequence[str]] = None) -> list[Device]:
        """Take a snapshot of devices and their spans.

        Args:
            selection: Optional device paths or names to restrict the run to.
                None means every device the driver exposes.

        Returns:
            Devices in discovery order

        Raises:
            DeviceEnumerationError: If the store is unavailable or a selected
                device does not exist
        """
        ...

    @abstractmethod
    def read_span_type(self, device: Device, span_number: int) -> LineType:
        """Read the live type of one span (bypasses the snapshot).

        Raises:
            DeviceEnumerationError: If the span's attribute cannot be read
        """
        ...

    @abstractmethod
    def write_span_type(self, device: Device, span_number: int, line_type: LineType) -> None:
        """Write a new type to one span.

        Raises:
            DeviceWriteError: If the driver rejects the write
        """
        ...


class IRuleParser(ABC):
    """Port for turning rule-file text into an ordered rule sequence."""

    @abstractmethod
    def parse(self, text: str, source: Optional[str] = None) -> list[Rule]:
        """Parse rule-file text.

        Args:
            text: Raw rule-file content
            source: Optional file name for error messages

        Raises:
            ConfigParseError: On the first malformed line
        """
        ...

    @abstractmethod
    def parse_file(self, path: Union[str, Path]) -> list[Rule]:
        """Read and parse a rule file.

        Raises:
            ConfigParseError: If the file is missing, unreadable or malformed
        """
        ...
