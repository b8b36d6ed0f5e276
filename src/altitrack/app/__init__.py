"""Headless entry point that drives a tracking session from the command line."""
