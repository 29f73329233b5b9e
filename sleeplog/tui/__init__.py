"""
Terminal user interface.

Textual app and widgets for the sleep tracker.
"""
