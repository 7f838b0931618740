"""
Unit tests for Vector2D.
"""

import pytest
from orbitwm.vector import Vector2D


@pytest.mark.unit
class TestVector2D:
    """Test componentwise vector arithmetic."""

    def test_default_is_origin(self):
        """Test a default vector is (0, 0)."""
        assert Vector2D() == Vector2D(0, 0)

    def test_add(self):
        """Test addition."""
        assert Vector2D(1, 2) + Vector2D(10, -20) == Vector2D(11, -18)

    def test_sub(self):
        """Test subtraction."""
        assert Vector2D(1, 2) - Vector2D(10, -20) == Vector2D(-9, 22)

    def test_max(self):
        """Test max picks the larger value on each axis independently."""
        assert Vector2D(5, 50).max(Vector2D(32, 32)) == Vector2D(32, 50)

    def test_immutable(self):
        """Test vectors can not be mutated in place."""
        v = Vector2D(1, 2)
        with pytest.raises(AttributeError):
            v.x = 3
