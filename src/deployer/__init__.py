"""Deployer: signed webhook intake for deployment nodes."""

__version__ = "0.1.0"
