"""Domain: env key grammar and exceptions."""
