"""SMART disk health collection from smartctl and nvme-cli, normalisation, and JSON or NATS output."""

__version__ = "0.1.0"