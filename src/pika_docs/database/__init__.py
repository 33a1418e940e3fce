"""Cosmos DB access: client lifecycle and per-container repositories."""
