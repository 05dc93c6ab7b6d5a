"""Minimal multi-user task tracker: task engine, REST API, HTML views and a console client."""

__version__ = "0.1.0"
