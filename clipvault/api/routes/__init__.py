"""
API route modules, mounted under /api by clipvault.main.
"""
