"""Opsboard - site health monitoring and uptime aggregation."""
