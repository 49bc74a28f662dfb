"""End-to-end analysis pipelines."""

from .birds import BirdAnalysisResult, run_bird_analysis
from .trees import TreeAnalysisResult, run_tree_analysis

__all__ = ['BirdAnalysisResult', 'run_bird_analysis', 'TreeAnalysisResult', 'run_tree_analysis']
