"""
Session state and the event-driven pipeline that mutates it.
"""
