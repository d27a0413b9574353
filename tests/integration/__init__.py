"""
Integration tests for DataMagic.

These tests verify that all components work together correctly:
importing a data directory, searching it through the facade, and
searching it through the REST API.
"""

import pytest


# Integration test markers
integration = pytest.mark.integration
