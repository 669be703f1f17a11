"""Command line actions for bloggernetes."""
