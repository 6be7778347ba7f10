"""API middleware package.

Cross-cutting HTTP concerns (authentication) live here so routers stay
focused on handing requests to the supervisor.

Tags:
    runit, api, middleware
"""
