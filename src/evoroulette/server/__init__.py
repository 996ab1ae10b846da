"""HTTP server for Evolution Roulette."""
