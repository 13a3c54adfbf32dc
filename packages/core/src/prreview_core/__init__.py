"""Core library for prreview: GitHub queries, filtering and rendering."""
