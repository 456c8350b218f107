"""Install skills published in GitHub repositories and keep them up to date."""

__version__ = "0.1.0"
