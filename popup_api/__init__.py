"""Popup store backend: CRUD over promotional popup records kept in a JSON file."""
