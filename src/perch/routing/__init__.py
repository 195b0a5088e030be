"""Routing — ordered named routes with matching and path generation.

Templates are compiled once when a route is registered; generators are
compiled on first use and cached on the route.
"""
