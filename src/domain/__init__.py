"""Domain layer: entities, payload validation and use cases.

Code in this package has no knowledge of HTTP or SQL. It receives its
collaborators (such as the book store) from the outside and signals failures
with the exceptions defined in ``src.core.exceptions``.
"""
