"""
Test suite for the Doctor Appointment API.

Contains unit and integration tests for the application's functionality.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
