"""Resolver package for the GraphQL schema.

Resolvers are imported lazily by the root query/mutation types and by field
resolvers on the object types; each one opens its own database session.
"""
