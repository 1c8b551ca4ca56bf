"""Chat transports and wallet backends."""
