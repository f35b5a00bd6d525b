"""
ClipVault - password-gated video upload broker.

This package contains the complete application:
- core: Framework-agnostic upload/metadata logic
- infrastructure: Backblaze B2 and Supabase integrations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
