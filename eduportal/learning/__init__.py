"""Learning context: the student dashboard and assignment submissions."""
