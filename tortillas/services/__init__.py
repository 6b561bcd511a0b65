"""
Services Package

Persistence helpers, the credential store and the session store.
"""
