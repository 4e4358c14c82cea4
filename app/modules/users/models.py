# Supabase table: users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, generated by UserService.reconcile)
- farcaster_id: text (unique, not null) - Farcaster FID, the external identity
- farcaster_username: text (default: '')
- farcaster_display_name: text (default: '')
- farcaster_pfp_url: text (default: '')
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

The unique constraint on farcaster_id is required: reconcile() is a
check-then-act upsert and relies on the store to reject a concurrent
duplicate insert.
"""
