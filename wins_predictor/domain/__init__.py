"""Domain layer: observation schema, ML components and services."""
