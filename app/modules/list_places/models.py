# Supabase table: list_places
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

list_places:
- id: uuid (primary key, generated by ListPlaceService.add_place_to_list)
- list_id: uuid (foreign key to lists.id, not null)
- place_id: uuid (foreign key to places.id, not null)
- added_by: uuid (foreign key to users.id, nullable) - who attached the place
- note: text (nullable)
- photo_url: text (nullable)
- added_at: timestamp (default: now())

There is no unique constraint on (list_id, place_id) and adding does not
check for an existing membership, so the same place can appear in a list
more than once. Removal by (list_id, place_id) deletes every such row.
"""
