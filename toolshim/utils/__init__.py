"""
Utility modules for toolshim.
"""

from .logging import flush_handlers, get_logger, setup_root_logger

__all__ = ["flush_handlers", "get_logger", "setup_root_logger"]
