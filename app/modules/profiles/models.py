# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

profiles:
- user_id: bigint (primary key, references users.id) - at most one profile per user
- first_name: text (not null)
- last_name: text (not null)
- age: integer (not null, 0-100)
- gender: text (not null) - male | female | other
- height: double precision (not null, cm)
- weight: double precision (not null, kg)
- goal: text (not null) - weight-loss | muscle-gain | general-fitness | strength | endurance
- level: text (not null) - beginner | intermediate | advanced
- place: text (not null) - gym | home | outdoor | hybrid
- equipment: jsonb (not null)
- injuries: jsonb (nullable)
- others: jsonb (nullable)
- days: integer (not null, 0-7)
- session_time: integer (not null, minutes)
- able: boolean (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
