"""Extract — find peripheral constructions and method calls in source text.

Submodules:
  models     UsageEvent, MethodCall, Extraction, Unresolved.
  parsing    Depth/quote-aware lexical helpers (argument splitting, values).
  extractor  UsageExtractor and the one-shot extract().
"""

from .models import Unresolved, UsageEvent, MethodCall, Extraction
from .parsing import split_arguments, parse_value, parse_arguments
from .extractor import UsageExtractor, extract

__all__ = [
    # Models
    "Unresolved", "UsageEvent", "MethodCall", "Extraction",
    # Parsing
    "split_arguments", "parse_value", "parse_arguments",
    # Extractor
    "UsageExtractor", "extract",
]
