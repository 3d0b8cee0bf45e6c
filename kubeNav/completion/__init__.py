# kubeNav/completion/__init__.py
from .completer import Completer

__all__ = ['Completer']
