"""Chat front end for a single-user Grin wallet."""
