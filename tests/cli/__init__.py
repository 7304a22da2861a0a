"""
CLI command tests for rancli.

This package contains functional tests for CLI commands:
- test_ransim.py: RAN simulator node command tests
- test_topo.py: Topology query command tests
- test_config_command.py: Configuration command tests
- test_cli_utils.py: Shared option callbacks, error reporting and output
"""
