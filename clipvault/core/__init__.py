"""
Core upload logic.

This module is framework-agnostic - it doesn't import FastAPI, boto3
or Supabase. Storage and persistence are reached through protocols so
the services can be tested with in-memory fakes.
"""
