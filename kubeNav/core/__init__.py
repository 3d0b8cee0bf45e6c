# kubeNav/core/__init__.py
"""
KubeNav Core

Session state, configuration and cluster access.
"""
