"""Per-project command slots dispatched to tmux or a detached shell."""

from .config import GlobalConfig, load_config, merge_config
from .dispatcher import DispatchResult, DispatchState, Dispatcher
from .models import NUM_SLOTS, ProjectState, Slot
from .runner import ProjectRunner
from .store import ProjectStore

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "DispatchResult",
    "DispatchState",
    "Dispatcher",
    "GlobalConfig",
    "load_config",
    "merge_config",
    "NUM_SLOTS",
    "ProjectRunner",
    "ProjectState",
    "ProjectStore",
    "Slot",
]
