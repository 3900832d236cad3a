"""Ports: interfaces the relay core depends on."""
