"""Logger configuration, rotating log files, and notification models and delivery."""

__version__ = "0.1.0"