"""Infrastructure adapters for span type assignment.

These adapters implement the port interfaces defined in the domain layer,
connecting the application to the rule file and the driver's attribute store.
"""

from .memory_store import InMemoryDeviceStore
from .rule_parser import TextRuleParser
from .sysfs_store import DEFAULT_DEVICES_DIR, SysfsDeviceStore

__all__ = [
    "TextRuleParser",
    "SysfsDeviceStore",
    "InMemoryDeviceStore",
    "DEFAULT_DEVICES_DIR",
]
