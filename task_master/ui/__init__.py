"""Terminal output for Task Master commands."""
