"""Core step-binding components."""
