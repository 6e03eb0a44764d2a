"""Transport adapters implementing the channel ports."""
