"""ux-commit-check: pre-commit UI/UX convention checks for front-end code."""

__version__ = "1.2.0"
