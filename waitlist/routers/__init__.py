"""API routers for the Teed waitlist."""
