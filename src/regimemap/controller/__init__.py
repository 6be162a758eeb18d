"""
The CONTROLLER layer runs the regime grid computation off the main thread and
filters its results before they reach the UI.
"""
