"""Kernel – errors, caller identity and time primitives shared by every layer."""
