"""Fintrack: personal finance tracking with balance-consistent transactions."""

__version__ = "0.1.0"


def __getattr__(name):
    # Resolved lazily so that importing the package does not pull in click
    if name == "main":
        from fintrack.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
