"""Shared test fixtures package.

Holds helpers importable from any test module; pytest fixtures themselves
live in conftest.py.
"""
