"""
Tests for resources app.
"""
from .models import Resource


class TestResource:

    def test_is_registered(self):
        assert Resource(title='Data').is_registered is False
        assert Resource(title='Data', doi='10.5880/GFZ.1.2024.001').is_registered is True

    def test_is_physical_object(self):
        assert Resource(title='Core', resource_type='PhysicalObject').is_physical_object is True
        assert Resource(title='Data', resource_type='Dataset').is_physical_object is False
