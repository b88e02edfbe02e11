"""Business logic for accounts app.

This layer contains:
- User registration
- Credential checks and session principal lookup
"""
