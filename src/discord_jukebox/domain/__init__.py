"""Domain layer: queue entity, value objects and shared kernel."""
