# __init__.py
import logging
import flask

from app.api_context import ApiContext
from app.api_handlers import register_all
from sql.psql_client import PSQLClient
from sql.psql_interface import NavigationInterface
from util.config_reader import ConfigReader
from util.navbars.config_store import ConfigStore
from util.navbars.document_source import ProfileDocumentSource
from util.navbars.feed_query import FeedQuery
from util.navbars.settings import load_navigation_settings

# Configure root logger at module import time (can be customized via app.config later)
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_api_context(reader: ConfigReader | None = None) -> ApiContext:
	reader = reader or ConfigReader()
	settings = load_navigation_settings(reader=reader)
	interface = NavigationInterface(PSQLClient.from_config(reader))

	source = ProfileDocumentSource(interface, reader=reader, fallback_document=settings.fallback_document)
	return ApiContext(
		config_store=ConfigStore(source, repository=interface, settings=settings),
		feed_query=FeedQuery(interface, settings=settings),
		viewers=interface,
		settings=settings,
	)


def create_app(ctx: ApiContext | None = None):
	# Standard Flask application factory
	app = flask.Flask(__name__)
	ctx = ctx or build_api_context()

	api = flask.Blueprint("api", __name__)
	register_all(api, ctx)
	app.register_blueprint(api, url_prefix="/super-navigation-suite")

	logger.debug(
		"Navigation suite enabled=%s cache_minutes=%s max_panel_items=%s",
		ctx.settings.enabled,
		ctx.settings.cache_minutes,
		ctx.settings.max_panel_items,
	)
	return app
