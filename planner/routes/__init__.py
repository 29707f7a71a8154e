"""HTTP routes for the planner front end."""
