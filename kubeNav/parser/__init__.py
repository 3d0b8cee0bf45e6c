# kubeNav/parser/__init__.py
from .line_parser import tokenize, tokenize_partial

__all__ = ['tokenize', 'tokenize_partial']
