class HclError(Exception):
    """Base exception for HCL catalog errors."""
    pass

class ConfigError(HclError):
    """Configuration loading specific errors."""
    pass

class DataSourceError(HclError):
    """Sheet fetch specific errors."""
    pass

class GroupError(HclError):
    """Group management errors."""
    pass

class GroupNotFoundError(GroupError):
    pass

class LastGroupError(GroupError):
    """Raised when deleting the only remaining group."""
    pass
