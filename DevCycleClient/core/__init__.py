from .client import DevCycleCloudClient
from .contracts import DevCycleClientContract

__all__ = ["DevCycleClientContract", "DevCycleCloudClient"]
