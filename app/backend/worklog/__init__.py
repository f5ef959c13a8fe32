"""Worklog reporting backend."""
