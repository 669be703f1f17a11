"""Tests for the bloggernetes command line tool."""
