"""Skill catalog: categories, skills and shared templates."""
