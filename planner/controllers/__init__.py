"""
Request controllers for the planner front end.

Controllers return ``(data, status_code, headers)`` and leave cookies,
flashing and rendering to the routes in :mod:`planner.routes`.
"""
