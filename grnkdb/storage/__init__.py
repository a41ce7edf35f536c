"""Readers and writers for the files the catalog builder produces."""
