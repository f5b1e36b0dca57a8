# Utility functions
from .validation import InvalidArgumentError, check_count, as_buffer
from .system import SystemCapabilities, get_system_capabilities
