"""REST API + HTML views (Flask) and the background server runner."""
