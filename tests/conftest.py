"""Shared pytest fixtures for the Semantic SEO engine tests."""

import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'src' is importable.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)


@pytest.fixture()
def tables():
    """Bundled heuristic tables."""
    from src.modules.semantic_analysis.heuristics import default_tables
    return default_tables()


@pytest.fixture()
def seo_payload():
    """Minimal page about SEO optimization with URL and H1 signals."""
    return {
        "content": (
            "SEO optimization is the process of improving website visibility. "
            "SEO optimization requires keyword research."
        ),
        "headings": [
            {"tag": "h1", "text": "Complete Guide to SEO Optimization", "keywords": []},
        ],
        "url_keywords": ["seo", "optimization"],
        "meta_keywords": [],
    }


@pytest.fixture()
def rich_payload():
    """A fuller page with subheadings, meta tokens, alt texts and entities."""
    return {
        "title": "Best Running Shoes for Beginners",
        "content": (
            "Choosing running shoes is the first step for new runners. "
            "Dr. Sarah Miller, a certified sports specialist, has tested running shoes "
            "for years. In my experience, cushioned running shoes reduce injuries. "
            "According to research by Stride Labs Inc, proper fit matters more than price. "
            "Our shop in Portland City offers a warranty and a privacy policy. "
            "Trail running shoes differ from road running shoes in grip. "
            "Compare the best models before you buy."
        ),
        "headings": [
            {"tag": "h1", "text": "Best Running Shoes for Beginners",
             "keywords": ["running shoes", "beginners"]},
            {"tag": "h2", "text": "Trail Running Shoes", "keywords": ["trail running"]},
            {"tag": "h2", "text": "Road Running Tips", "keywords": ["road running"]},
            {"tag": "h3", "text": "Shoe Fit and Sizing", "keywords": ["shoe fit", "sizing"]},
        ],
        "url_keywords": ["best", "running", "shoes"],
        "meta_keywords": ["running shoes", "cushioned shoes", "beginner runners"],
        "image_alt_texts": [
            {"text": "Trail running shoes on rocks", "keywords": ["trail running shoes"]},
            "Runner lacing road shoes",
        ],
        "meta_tag_keywords": ["jogging", "running shoes"],
    }


@pytest.fixture()
def settings_file(tmp_path):
    """A minimal settings.yaml in a temp dir."""
    path = tmp_path / "settings.yaml"
    path.write_text(
        "app:\n"
        "  name: \"Semantic SEO Analyzer\"\n"
        "  version: \"1.0.0\"\n"
        "logging:\n"
        "  level: \"WARNING\"\n"
        "analysis:\n"
        "  heuristics_path: \"\"\n"
        "  top_terms: 5\n"
        "output:\n"
        "  indent: 2\n",
        encoding="utf-8",
    )
    return path
