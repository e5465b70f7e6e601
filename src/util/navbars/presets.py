"""Starting-point navigation documents offered to administrators."""
from __future__ import annotations

import copy

_REDDIT_STYLE = {
	"version": 1,
	"menus": [
		{
			"id": "reddit-primary",
			"label": "Reddit Style",
			"placement": "top_nav",
			"layout": "mega_grid",
			"open_mode": "hover",
			"hover_delay_ms": 100,
			"items": [
				{"id": "hot", "title": "Hot", "type": "link", "url": "/latest"},
				{"id": "new", "title": "New", "type": "link", "url": "/new"},
				{"id": "top", "title": "Top", "type": "link", "url": "/top"},
				{
					"id": "communities",
					"title": "Communities",
					"type": "section_heading",
					"panel": {"source_type": "category_latest", "category_slug": "general", "limit": 8},
				},
			],
		},
	],
	"sidebars": [],
	"discovery_blocks": [],
}

_NETFLIX_STYLE = {
	"version": 1,
	"menus": [
		{
			"id": "netflix-primary",
			"label": "Netflix Style",
			"placement": "top_nav",
			"layout": "mega_grid",
			"open_mode": "hover",
			"hover_delay_ms": 220,
			"items": [
				{"id": "home", "title": "Home", "type": "link", "url": "/"},
				{
					"id": "trending",
					"title": "Trending",
					"type": "link",
					"url": "/top",
					"panel": {"source_type": "category_top", "category_slug": "general", "time_range": "weekly", "limit": 10},
				},
				{
					"id": "new-releases",
					"title": "New Releases",
					"type": "link",
					"url": "/latest",
					"panel": {"source_type": "latest", "limit": 10},
				},
			],
		},
	],
	"sidebars": [],
	"discovery_blocks": [],
}

_KNOWLEDGE_BASE = {
	"version": 1,
	"menus": [
		{
			"id": "kb-primary",
			"label": "Knowledge Base",
			"placement": "top_nav",
			"layout": "dropdown",
			"open_mode": "click",
			"hover_delay_ms": 0,
			"items": [
				{"id": "docs-home", "title": "Documentation", "type": "link", "url": "/categories"},
				{
					"id": "popular-guides",
					"title": "Popular Guides",
					"type": "section_heading",
					"panel": {"source_type": "category_top", "category_slug": "general", "time_range": "monthly", "limit": 6},
				},
				{"id": "release-notes", "title": "Release Notes", "type": "tag", "tag": "release-notes"},
			],
		},
	],
	"sidebars": [],
	"discovery_blocks": [],
}

PRESETS = {
	"reddit_style": _REDDIT_STYLE,
	"netflix_style": _NETFLIX_STYLE,
	"knowledge_base": _KNOWLEDGE_BASE,
}


def list_presets() -> dict[str, dict]:
	# Callers get their own copies; the catalog itself never changes.
	return {name: copy.deepcopy(doc) for name, doc in PRESETS.items()}
