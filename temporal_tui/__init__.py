"""Read-only terminal dashboard for Temporal workflow executions."""

__version__ = "0.1.0"
