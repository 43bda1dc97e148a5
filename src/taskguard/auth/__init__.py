"""Authentication and authorization.

Learn: One authentication path, fully stateless:
    email/password → bcrypt check → signed JWT
    Authorization: Bearer <jwt> → claims → IdentityContext

There is no session table and no revocation list. A token is good until
its exp claim passes, and the only thing needed to check it is the
process-wide signing secret.
"""
