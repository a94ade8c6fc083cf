"""Adapters translating normalized AI requests into provider specific calls."""
