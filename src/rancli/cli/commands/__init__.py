"""
CLI command modules.

This module provides all CLI commands for rancli, organized into logical groups.
"""

# Configuration commands
from rancli.cli.commands.config import config

# RAN simulator node commands
from rancli.cli.commands.ransim import ransim

# Topology query commands
from rancli.cli.commands.topo import topo

__all__ = [
    "config",
    "ransim",
    "topo",
]
