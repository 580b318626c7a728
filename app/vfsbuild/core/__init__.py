"""Core tree building: normalization, conflict resolution and materialization."""
