"""Adapters – concrete search engine integrations."""
