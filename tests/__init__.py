"""Tests for the savanna-forest boundary model."""
