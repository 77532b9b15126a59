"""User interface helpers for stock forecasting."""

from .interactive import run_interactive_wizard

__all__ = ["run_interactive_wizard"]
