"""Teaching context: use cases for a teacher's courses, rosters and assignments."""
