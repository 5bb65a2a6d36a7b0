"""Search engine package: data model, config, relevance rules and pipelines.

The engine ranks an in-memory accommodation corpus against a free-text query.
Persistence, caching and HTTP concerns live with the caller.
"""
