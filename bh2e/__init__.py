"""Black Hack 2e sheet engine."""
