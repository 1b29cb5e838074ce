from infrastructure.health.disk_space import DiskSpaceIndicator

__all__ = ["DiskSpaceIndicator"]
