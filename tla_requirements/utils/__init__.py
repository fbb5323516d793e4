from .logger import setup_logging
from .ids import new_requirement_id

__all__ = ["setup_logging", "new_requirement_id"]
