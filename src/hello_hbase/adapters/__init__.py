"""Adapters layer - implementations of ports.

Adapters connect the application to external systems:
- Outbound adapters: HBase over Thrift (happybase), in-memory store
"""
