"""
rancli - RAN simulator and topology command-line client

This package provides:
- CLI: node management for the RAN simulator and topology queries
- Client: HTTP clients for the node model and topology APIs
- Filter compiler: label query strings to topology API filters
"""

__version__ = "0.1.0"
