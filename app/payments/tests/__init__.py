"""
Tests for payments app.

This package contains test modules for:
- test_models.py: Payment constraints, versioning and queryset helpers
- test_state_transitions.py: Payment FSM transitions
- test_tasks.py: Team repair sweep

Usage:
    pytest payments/tests/
    pytest payments/tests/test_tasks.py
"""
