"""Startup wiring: logging and service construction."""
