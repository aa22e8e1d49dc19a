"""Application layer – search criteria, compilation and pagination."""
