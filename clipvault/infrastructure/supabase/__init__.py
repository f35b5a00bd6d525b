"""
Supabase integration for video metadata.

Includes mock mode for local development without a Supabase project.
"""
