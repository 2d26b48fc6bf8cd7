"""Project — multi-file analysis and cross-file pin conflicts.

Submodules:
  models     CrossFileConflict, ProjectAnalysis.
  aggregate  aggregate, analyze_project, merge_analyses.
"""

from .models import CrossFileConflict, ProjectAnalysis
from .aggregate import aggregate, analyze_project, merge_analyses

__all__ = [
    # Models
    "CrossFileConflict", "ProjectAnalysis",
    # Aggregation
    "aggregate", "analyze_project", "merge_analyses",
]
