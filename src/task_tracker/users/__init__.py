"""User registry: registration, clear-text login check, existence gate for the task engine."""
