"""Terminal building blocks for browsing and analysing meal-card transactions."""

__version__ = "0.1.0"