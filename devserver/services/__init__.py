"""Services behind the add-on script commands."""

from .build_coordinator import BuildCoordinator
from .script_manager import ScriptManager

__all__ = ["BuildCoordinator", "ScriptManager"]
