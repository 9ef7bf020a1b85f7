"""Kitchen domain services: rooms, customer orders and timers.

This package holds the room registry and the periodic ticker, kept
apart from the Socket.IO handlers so the transport only translates
events into registry calls and broadcasts.
"""
