"""HTTP surface for suggestions."""
