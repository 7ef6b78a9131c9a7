"""Domain layer: exceptions and ports, free of transport dependencies."""
