"""Inventory discovery: snapshot sources, state and sync orchestration."""
