"""Crew domain - field job listing, progress autosave and completion"""
