"""Rewriter orchestration and synthetic documents."""
