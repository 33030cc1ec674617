"""Tests for dsadmin."""
