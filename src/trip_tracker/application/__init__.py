"""Application layer - use cases over the trip domain."""
