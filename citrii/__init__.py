"""Mii database editor and face resource decoder."""
