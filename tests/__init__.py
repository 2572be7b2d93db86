"""
Test suite for the MediCare Booking API.

Contains storage, service and HTTP-level tests.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
