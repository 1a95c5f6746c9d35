"""Domain records and pure scheduling logic."""
