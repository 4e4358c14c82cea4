# Supabase table: lists
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

lists:
- id: uuid (primary key)
- title: text (not null)
- description: text (nullable)
- visibility: text (not null, default: 'private') - values: private, public, community
- owner_id: uuid (foreign key to users.id, not null)
- cover_image_url: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Visibility rules (see permissions.py):
- private: only the owner can see it
- public: anyone can see it, only the owner can add places
- community: anyone can see it and any signed-in user can add places
"""
