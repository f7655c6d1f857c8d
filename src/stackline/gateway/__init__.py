"""Gateways to external systems consumed by the stackline core."""
