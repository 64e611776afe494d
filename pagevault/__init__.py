"""Pagevault: an upgradeable keyed page store."""
