"""Authentication and request identity.

Learn: Users log in with email/password and receive a signed JWT carrying
their id, email and role. Every protected route goes through the access
gate in dependencies.py, which verifies that token and exposes the claims
to the handler. There is no server-side session table: the token is the
session.
"""
