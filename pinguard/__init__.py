"""pinguard — static pin-conflict and resource analysis for RBoard mruby sources.

Subpackages:
  pins         Pin identity and normalization.
  peripherals  Capability tables and per-kind validators.
  extract      Usage events from source text.
  registry     Exclusive pin allocation per file.
  estimate     RAM / timing / CPU / power heuristics.
  project      Cross-file aggregation.
  web          FastAPI server.
"""

from .analyzer import FileAnalysis, analyze_file, analyze_source
from .config import AnalyzerConfig, DEFAULT_CONFIG, load_config
from .project import ProjectAnalysis, analyze_project

__all__ = [
    "FileAnalysis", "analyze_file", "analyze_source",
    "AnalyzerConfig", "DEFAULT_CONFIG", "load_config",
    "ProjectAnalysis", "analyze_project",
]
