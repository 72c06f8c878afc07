"""Core orchestration: options, engine adapter, result folding."""
