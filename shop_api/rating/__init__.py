"""Buyer ratings of ordered products."""
