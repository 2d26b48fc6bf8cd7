"""Registry — exclusive pin allocation for one analysis unit.

Submodules:
  models  AllocationRecord, AllocationResult.
  engine  AllocationRegistry (normalize, duplicate check, validate, record).
"""

from .models import AllocationRecord, AllocationResult
from .engine import AllocationRegistry, PIN_ROLES

__all__ = [
    # Models
    "AllocationRecord", "AllocationResult",
    # Engine
    "AllocationRegistry", "PIN_ROLES",
]
