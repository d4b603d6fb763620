"""Adapters layer - Concrete implementations of ports.

Connects the application to the outside world:
- Layer registry (JSON file)
- Hotspot sources (KML map documents over HTTP, Twitter search)
"""
