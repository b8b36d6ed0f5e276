"""Auxiliary helpers: debug instrumentation and altitude plots."""
