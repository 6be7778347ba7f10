"""API routers package.

Each router module owns one endpoint group and delegates to
``runit.execution`` for everything beyond request decoding.

Tags:
    runit, api, routers
"""
