"""creatif-cli: scaffolding for Creatif applications."""

__version__ = "0.1.0"
