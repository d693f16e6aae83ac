"""Framework-agnostic web ports."""

from movasafe.web.ports.filter import CallNext, WebFilter

__all__ = ["CallNext", "WebFilter"]
