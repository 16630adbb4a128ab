from .base import Base
from .device import Device
from .link import Link

__all__ = ["Base", "Device", "Link"]
