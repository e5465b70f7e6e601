import logging
import threading
from psycopg2 import sql
from psycopg2.pool import ThreadedConnectionPool

logger = logging.getLogger(__name__)


class PSQLClient:
	def __init__(
		self,
		database: str | None = None,
		user: str | None = None,
		password: str | None = None,
		host: str | None = None,
		port: int | str | None = None,
		minconn: int = 1,
		maxconn: int = 10,
	):
		self.database = database or "postgres"
		self.user     = user or     "postgres"
		self.password = password
		self.host     = host
		self.port     = port
		self.minconn  = minconn
		self.maxconn  = maxconn

		# Pool is opened on first use so a missing database never blocks startup.
		self._pool: ThreadedConnectionPool | None = None
		self._pool_lock = threading.Lock()

	@classmethod
	def from_config(cls, reader, filename: str = "psql.conf") -> "PSQLClient":
		conf = (reader.find(filename) if reader is not None else None) or {}
		return cls(
			database=conf.get("DATABASE"),
			user=conf.get("USER"),
			password=conf.get("PASSWORD") or None,
			host=conf.get("HOST") or None,
			port=conf.get("PORT") or None,
		)

	def _connect_kwargs(self) -> dict:
		kwargs = {"database": self.database, "user": self.user}
		if self.password:
			kwargs["password"] = self.password
		if self.host:
			kwargs["host"] = self.host
		if self.port:
			kwargs["port"] = self.port
		return kwargs

	def _get_pool(self) -> ThreadedConnectionPool:
		if self._pool is None:
			with self._pool_lock:
				if self._pool is None:
					logger.debug("Opening connection pool for database %s", self.database)
					self._pool = ThreadedConnectionPool(self.minconn, self.maxconn, **self._connect_kwargs())
		return self._pool

	def _get_conn(self):
		"""Get a connection from the pool."""
		return self._get_pool().getconn()

	def _put_conn(self, conn):
		"""Return a connection to the pool."""
		self._get_pool().putconn(conn)

	def _execute(self, query, params: list | None = None) -> list[dict] | None:
		conn = self._get_conn()
		try:
			with conn.cursor() as cur:
				cur.execute(query, params or [])
				if cur.description is not None:
					colnames = [d[0] for d in cur.description]
					rows = cur.fetchall()
					conn.commit()
					return [dict(zip(colnames, r)) for r in rows]
				conn.commit()
				return None
		except Exception:
			conn.rollback()
			raise
		finally:
			self._put_conn(conn)

	def fetch_all(self, query, params: list | None = None) -> list[dict]:
		return self._execute(query, params) or []

	def fetch_one(self, query, params: list | None = None) -> dict | None:
		rows = self.fetch_all(query, params)
		return rows[0] if rows else None

	def table_exists(self, schema: str, table: str) -> bool:
		q = """
			SELECT 1
			FROM information_schema.tables
			WHERE table_schema = %s AND table_name = %s;
		"""
		return bool(self._execute(q, [schema, table]))

	def get_row_by_column(self, schema: str, table: str, column: str, value) -> dict | None:
		q = sql.SQL("SELECT * FROM {}.{} WHERE {} = %s LIMIT 1").format(
			sql.Identifier(schema),
			sql.Identifier(table),
			sql.Identifier(column),
		)
		return self.fetch_one(q, [value])

	def closeall(self) -> None:
		with self._pool_lock:
			if self._pool is not None:
				self._pool.closeall()
				self._pool = None
