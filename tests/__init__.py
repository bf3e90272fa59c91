"""Tests for the Ryobi GDO integration."""
