"""Routing — exact and prefix route tables.

Routes are registered during startup and frozen before the first
request is dispatched.
"""
