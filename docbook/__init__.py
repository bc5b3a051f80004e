"""
Doctor Appointment API

A FastAPI-based backend for booking doctor appointments, with patient and
doctor registration, role-based access control, and appointment scheduling.
"""

__version__ = "1.0.0"
