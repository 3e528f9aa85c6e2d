# src/meshsolve/analysis/__init__.py
"""
Defines the public interface for the analysis services package.
"""
from .results import TopologyAnalysisResults
from .tools import TopologyAnalyzer
from .exceptions import TopologyAnalysisError

__all__ = [
    # Formal Result Contracts
    "TopologyAnalysisResults",
    # Analysis Services
    "TopologyAnalyzer",
    # Exceptions
    "TopologyAnalysisError",
]
