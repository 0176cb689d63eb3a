"""Semantic SEO analysis and keyword inference."""
