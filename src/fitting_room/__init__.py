"""Virtual fitting room session engine."""
