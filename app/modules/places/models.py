# Supabase table: places
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

places:
- id: uuid (primary key; client-supplied or generated by PlaceService.create)
- name: text (not null)
- address: text (nullable)
- lat: numeric (not null) - decimal degrees, [-90, 90]
- lng: numeric (not null) - decimal degrees, [-180, 180]
- type: text (nullable) - category
- description: text (nullable)
- website_url: text (nullable)
- image_url: text (nullable)
- created_by: uuid (foreign key to users.id, nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Deleting a place does not cascade to list_places; orphaned memberships are
cleaned up by the maintenance module.
"""
