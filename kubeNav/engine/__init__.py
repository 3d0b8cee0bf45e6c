# kubeNav/engine/__init__.py
"""
KubeNav Listing Engine

Cells, extractors and the generic table pipeline.
"""

from .cell import Cell, Extractor, ExtractorMap
from .table import compile_filter, render_list

__all__ = ['Cell', 'Extractor', 'ExtractorMap', 'compile_filter', 'render_list']
