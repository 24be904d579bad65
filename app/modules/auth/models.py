# Supabase table: users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

users:
- id: bigint (primary key, generated always as identity)
- name: text (not null)
- email: text (unique, not null) - matched exactly, no case folding
- password_hash: text (not null) - bcrypt hash, never returned by the API
- created_at: timestamp (default: now())

Sessions are not stored: the signed token cookie is the only session state.
"""
