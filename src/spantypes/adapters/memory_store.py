"""In-memory device store adapter.

A stand-in for the driver used by tests and for exercising rule files
against a captured device layout without touching hardware.
"""

import logging
from typing import Iterable, Optional, Sequence

from ..domain.entities import Device, LineType, Span
from ..domain.ports import IDeviceStore
from ..exceptions import DeviceEnumerationError, DeviceWriteError

logger = logging.getLogger(__name__)


class InMemoryDeviceStore(IDeviceStore):
    """Device store backed by plain dictionaries.

    Spans listed in ``locked`` behave like already-assigned spans: writes to
    them raise DeviceWriteError.

    Example:
        store = InMemoryDeviceStore([
            Device(path="/sys/devices/pci0000:00/0000:00:1e.0",
                   hardware_id="pci:0000:00:1e.0",
                   spans=(Span(1, LineType.E1), Span(2, LineType.E1))),
        ])
    """

    def __init__(
        self,
        devices: Iterable[Device] = (),
        locked: Iterable[tuple[str, int]] = (),
    ):
        self._order: list[str] = []
        self._identity: dict[str, tuple[Optional[str], Optional[str]]] = {}
        self._spans: dict[str, dict[int, LineType]] = {}
        self.locked: set[tuple[str, int]] = set(locked)
        self.writes: list[tuple[str, int, LineType]] = []

        for device in devices:
            self.add_device(device)

    def add_device(self, device: Device) -> None:
        if device.path in self._spans:
            raise ValueError(f"Duplicate device path: {device.path}")
        self._order.append(device.path)
        self._identity[device.path] = (device.hardware_id, device.location)
        self._spans[device.path] = {s.number: s.current_type for s in device.spans}

    def enumerate_devices(self, selection: Optional[Sequence[str]] = None) -> list[Device]:
        paths = list(self._order)
        if selection:
            paths = [self._lookup(wanted) for wanted in selection]
        return [self._snapshot(path) for path in dict.fromkeys(paths)]

    def read_span_type(self, device: Device, span_number: int) -> LineType:
        spans = self._spans.get(device.path)
        if spans is None or span_number not in spans:
            raise DeviceEnumerationError(f"Span {span_number} not present on {device.path}")
        return spans[span_number]

    def write_span_type(self, device: Device, span_number: int, line_type: LineType) -> None:
        spans = self._spans.get(device.path)
        if spans is None or span_number not in spans:
            raise DeviceWriteError(
                f"No such span {span_number}",
                device_path=device.path,
                span_number=span_number,
            )
        if (device.path, span_number) in self.locked:
            raise DeviceWriteError(
                "Span is assigned, type cannot be changed",
                device_path=device.path,
                span_number=span_number,
            )
        spans[span_number] = line_type
        self.writes.append((device.path, span_number, line_type))

    def _lookup(self, wanted: str) -> str:
        wanted = wanted.rstrip("/")
        for path in self._order:
            if wanted == path or wanted == path.rsplit("/", 1)[-1]:
                return path
        raise DeviceEnumerationError(f"Unknown device: {wanted}")

    def _snapshot(self, path: str) -> Device:
        hardware_id, location = self._identity[path]
        return Device(
            path=path,
            hardware_id=hardware_id,
            location=location,
            spans=tuple(Span(n, t) for n, t in self._spans[path].items()),
        )
