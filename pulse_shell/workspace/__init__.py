"""Workspace core: item tree, drop reconciler, session codec and persistence."""
