"""
Utilities package for Task Master.
"""
