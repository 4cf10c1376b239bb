"""Services module - MongoDB data access and email."""
