"""Pulse Shell - workspace tree and session persistence for the Pulse browser shell."""
