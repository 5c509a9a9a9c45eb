"""Sysfs device store adapter.

Implements IDeviceStore on top of the driver's sysfs tree:

    /sys/bus/dahdi_devices/devices/<name>/hardware_id   (may be empty)
    /sys/bus/dahdi_devices/devices/<name>/location      (may be empty)
    /sys/bus/dahdi_devices/devices/<name>/spantype      ("1:E1\\n2:T1\\n...")

Writing ``"<span>:<type>"`` to ``spantype`` changes one span. The driver
rejects the write once the span has been assigned.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from ..domain.entities import Device, LineType, Span
from ..domain.ports import IDeviceStore
from ..exceptions import DeviceEnumerationError, DeviceWriteError

logger = logging.getLogger(__name__)

DEFAULT_DEVICES_DIR = "/sys/bus/dahdi_devices/devices"

SPANTYPE_ATTR = "spantype"
HARDWARE_ID_ATTR = "hardware_id"
LOCATION_ATTR = "location"


def parse_spantype_attr(content: str) -> list[Span]:
    """Parse the ``spantype`` attribute into spans.

    Malformed lines are logged and skipped; the driver owns this format.
    """
    spans = []
    for line in content.splitlines():
        line = line.strip()
        if not line:
            continue
        number, sep, tag = line.partition(":")
        if not sep or not number.strip().isdigit():
            logger.warning(f"Ignoring malformed spantype entry: {line!r}")
            continue
        spans.append(Span(number=int(number), current_type=LineType.from_tag(tag)))
    return spans


class SysfsDeviceStore(IDeviceStore):
    """Device store reading and writing driver attributes under sysfs."""

    def __init__(self, devices_dir: Union[str, Path] = DEFAULT_DEVICES_DIR):
        """Initialize the store.

        Args:
            devices_dir: Directory holding one entry per device
        """
        self.devices_dir = Path(devices_dir)

    def enumerate_devices(self, selection: Optional[Sequence[str]] = None) -> list[Device]:
        if not self.devices_dir.is_dir():
            raise DeviceEnumerationError(
                f"No devices directory at {self.devices_dir} (is the driver loaded?)",
                root=str(self.devices_dir),
            )

        try:
            entries = sorted(self.devices_dir.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DeviceEnumerationError(
                f"Cannot list {self.devices_dir}: {e}",
                root=str(self.devices_dir),
                cause=e,
            ) from e

        if selection:
            entries = self._select(entries, selection)

        devices = []
        for entry in entries:
            device = self._load_device(entry)
            if device is not None:
                devices.append(device)

        logger.info(f"Found {len(devices)} device(s) under {self.devices_dir}")
        return devices

    def read_span_type(self, device: Device, span_number: int) -> LineType:
        content = self._read_attr(Path(device.path), SPANTYPE_ATTR)
        if content is None:
            raise DeviceEnumerationError(
                f"Cannot read {SPANTYPE_ATTR} of {device.path}",
                root=str(self.devices_dir),
            )
        for span in parse_spantype_attr(content):
            if span.number == span_number:
                return span.current_type
        raise DeviceEnumerationError(
            f"Span {span_number} not present on {device.path}",
            root=str(self.devices_dir),
        )

    def write_span_type(self, device: Device, span_number: int, line_type: LineType) -> None:
        attr_path = Path(device.path) / SPANTYPE_ATTR
        value = f"{span_number}:{line_type.value}\n"
        logger.debug(f"Writing {value.strip()!r} to {attr_path}")
        try:
            with open(attr_path, "w", encoding="ascii") as f:
                f.write(value)
        except OSError as e:
            raise DeviceWriteError(
                f"Driver rejected {span_number}:{line_type.value}: {e.strerror or e}",
                device_path=device.path,
                span_number=span_number,
                cause=e,
            ) from e

    def _select(self, entries: list[Path], selection: Sequence[str]) -> list[Path]:
        """Keep the entries named in ``selection``, in selection order."""
        by_key: dict[str, Path] = {}
        for entry in entries:
            by_key[entry.name] = entry
            by_key[str(entry)] = entry
            by_key[str(entry.resolve())] = entry

        selected = []
        for wanted in selection:
            key = wanted.rstrip("/")
            entry = by_key.get(key) or by_key.get(str(Path(key).resolve()))
            if entry is None:
                raise DeviceEnumerationError(
                    f"Unknown device: {wanted}", root=str(self.devices_dir)
                )
            if entry not in selected:
                selected.append(entry)
        return selected

    def _load_device(self, entry: Path) -> Optional[Device]:
        path = entry.resolve()
        spantype = self._read_attr(path, SPANTYPE_ATTR)
        if spantype is None:
            logger.warning(f"{path}: no {SPANTYPE_ATTR} attribute (old driver?), skipping")
            return None

        return Device(
            path=str(path),
            hardware_id=self._read_attr(path, HARDWARE_ID_ATTR) or None,
            location=self._read_attr(path, LOCATION_ATTR) or None,
            spans=tuple(parse_spantype_attr(spantype)),
        )

    @staticmethod
    def _read_attr(device_dir: Path, name: str) -> Optional[str]:
        """Read a stripped attribute value, None if missing or unreadable."""
        try:
            return (device_dir / name).read_text(encoding="utf-8", errors="replace").strip()
        except OSError:
            return None
