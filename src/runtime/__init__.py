from .context import RunState

__all__ = ["RunState"]
