# kubeNav/core/errors.py
"""
Exception taxonomy for KubeNav.

Configuration errors are raised at startup. Input and selection errors are raised by
command code and turned into user-visible messages by the dispatcher. Transport errors
are never raised past ``Environment.run_on_context``.
"""


class KubeNavError(Exception):
    """Base class for every error KubeNav reports to the user."""


# --- Configuration errors ---
class ConfigurationError(KubeNavError):
    """Missing or unusable configuration."""


class DuplicateCommandError(ConfigurationError):
    def __init__(self, name: str, existing: str, new: str):
        super().__init__(f"Command name '{name}' is registered by both '{existing}' and '{new}'")
        self.name = name


class RegistryFrozenError(ConfigurationError):
    def __init__(self, name: str):
        super().__init__(f"Cannot register '{name}': the command registry is already frozen")


# --- Input errors ---
class InputError(KubeNavError):
    """Bad user input. Never reaches the network."""


class UnknownCommandError(InputError):
    def __init__(self, name: str):
        super().__init__(f"Unknown command '{name}'. Type 'help' to list the available commands.")
        self.name = name


class UsageError(InputError):
    def __init__(self, message: str, usage: str = ""):
        text = message if not usage else f"{message}\n{usage.rstrip()}"
        super().__init__(text)
        self.usage = usage


class InvalidFilterError(InputError):
    def __init__(self, expression: str, reason: str):
        super().__init__(f"Invalid filter regex '{expression}': {reason}")
        self.expression = expression


class UnknownContextError(InputError):
    def __init__(self, name: str):
        super().__init__(f"Context '{name}' not found in the kubernetes configuration")
        self.name = name


class UnknownNamespaceError(InputError):
    def __init__(self, name: str):
        super().__init__(f"Namespace '{name}' does not exist in the active context")
        self.name = name


# --- Selection errors ---
class SelectionError(KubeNavError):
    """A row or object reference that cannot be resolved."""


class NoListingError(SelectionError):
    def __init__(self):
        super().__init__("No prior listing: run a list command (e.g. 'pods') before referring to rows")


class NoSuchRowError(SelectionError):
    def __init__(self, index: int, available: int):
        super().__init__(f"No such row {index}: the last listing has {available} row(s)")
        self.index = index
        self.available = available


class NoSelectionError(SelectionError):
    def __init__(self):
        super().__init__("No object selected: pass a row number or select one first")
