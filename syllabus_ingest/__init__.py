"""Syllabus ingestion service: document text to courses, assignments and events."""
