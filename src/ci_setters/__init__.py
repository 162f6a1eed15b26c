from .patching import run
from .types import Result, ResourceList, SetterValues

__all__ = ["Result", "ResourceList", "SetterValues", "run"]
