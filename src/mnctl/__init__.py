"""mnctl - masternode bootstrap and monitoring tool.

Fetches and verifies coin wallet binaries, seeds blockchain bootstrap
snapshots, generates daemon configuration and supervises the running daemon.
"""

__version__ = "0.1.0"
