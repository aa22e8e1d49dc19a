"""Testing – in-memory doubles for the OpenSearch client and kernel ports."""
