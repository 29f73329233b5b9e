"""
Tracker logic independent of any front end.
"""
