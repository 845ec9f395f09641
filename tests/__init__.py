"""Test suite for Image Meta.

This package contains test modules and fixtures for verifying the functionality
of the Image Meta tool. It includes tests for:
- Tag rule, flavor and image directive parsing
- Version resolution and flavor application
- Tag, label, JSON and bake file assembly
- Git context and repository metadata acquisition
- Configuration handling and output writing

The test suite uses pytest and provides fixtures for common test scenarios.
"""
