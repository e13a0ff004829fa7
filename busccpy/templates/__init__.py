"""Quarto document generators for consulting reports and presentations."""

from .presentation import create_presentation
from .report import create_report

__all__ = ["create_presentation", "create_report"]
