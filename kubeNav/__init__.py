# kubeNav/__init__.py
"""
KubeNav - an interactive shell for navigating Kubernetes clusters.
"""
__version__ = "0.3.0"
