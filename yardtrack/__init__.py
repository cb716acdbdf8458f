"""Yard occupancy tracking backend: dock doors, parking lanes and trailer moves."""
