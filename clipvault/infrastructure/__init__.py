"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- storage: Backblaze B2 URL signing (S3-compatible)
- supabase: Video metadata persistence

These wrappers translate between external formats and our domain models.
"""
