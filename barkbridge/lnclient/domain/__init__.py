"""Domain layer: canonical node-client types and the client protocol."""
