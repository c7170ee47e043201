"""
Shared helpers for the lesson pipeline agents.
"""
