"""Venue access: transport, ports, adapters."""
