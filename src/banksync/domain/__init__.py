"""Domain layer: value objects, ports and reconciliation services."""
