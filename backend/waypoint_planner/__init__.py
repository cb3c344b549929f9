"""Waypoint Route Planner backend."""
