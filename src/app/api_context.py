from __future__ import annotations

from dataclasses import dataclass, field

from util.navbars.config_store import ConfigStore
from util.navbars.feed_query import FeedQuery
from util.navbars.settings import NavigationSettings


@dataclass
class ApiContext:
	config_store: ConfigStore
	feed_query: FeedQuery
	viewers: object = None
	settings: NavigationSettings = field(default_factory=NavigationSettings)
	auth_token_name: str = "session"
