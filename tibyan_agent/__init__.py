"""Tibyan agent core: skill routing, output validation and leakage detection."""
