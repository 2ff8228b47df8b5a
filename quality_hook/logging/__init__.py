"""Console and structured logging for quality-hook."""
