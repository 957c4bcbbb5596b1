"""
Serialization schemas using Marshmallow for the Wellnest API.

Dump schemas are ``SQLAlchemyAutoSchema`` classes generated from the
models, with enum and money columns overridden so that responses carry
plain strings and numbers. Sensitive fields, such as password hashes,
are never exposed. Request bodies and query strings are validated with
plain ``Schema`` classes, one per operation, before any service runs.
"""
