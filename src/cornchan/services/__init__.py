"""Business logic services for the cornchan application."""
