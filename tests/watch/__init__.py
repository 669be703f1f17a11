"""Tests for bloggernetes."""
