"""
Tests for the pharmacy_service package: stores, services and HTTP routes.
"""
