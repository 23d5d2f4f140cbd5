"""
Services module for business logic separation.

Stores own persistence (redirects, blacklists); RedirectService holds the
submission, resolution and moderation rules on top of them.
"""
