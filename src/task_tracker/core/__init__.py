"""Shared application state and the Protocols the layers depend on."""
