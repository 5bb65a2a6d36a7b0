"""Pipelines for normalization, structured filtering, ranking and search.

Each step is callable on its own; ``search`` chains filtering and ranking.
"""
