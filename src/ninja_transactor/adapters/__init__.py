"""Driver adapters implementing the transactor resource handles."""
