# kubeNav/constants.py
"""
This module defines constants used throughout the KubeNav application.
"""

# Default Values
DEFAULT_NAMESPACE = "default"
DEFAULT_CONFIG_DIR_NAME = ".kube"
DEFAULT_KUBECONFIG_NAME = "config"
DEFAULT_COMPLETION_TIMEOUT = 1.0  # seconds
DEFAULT_REQUEST_TIMEOUT = 30.0    # seconds
DEFAULT_TABLE_FORMAT = "simple"

# Persisted state under the configuration directory
SETTINGS_FILE_NAME = "kubenav.config"
HISTORY_FILE_NAME = "kubenav.history"
HISTORY_LENGTH = 1000

# Environment variables
ENV_KUBECONFIG = "KUBECONFIG"

# Exit codes
EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_NO_CONFIG_DIR = 2

# Table rendering
ROW_NUMBER_HEADER = "####"
HEADER_NAME = "Name"
HEADER_NAMESPACE = "Namespace"
HEADER_AGE = "Age"
UNKNOWN_NAME = "<Unknown>"
