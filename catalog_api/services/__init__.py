"""Services Layer — async orchestration around the pure core (IO at the edges)."""
