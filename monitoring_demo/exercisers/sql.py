"""
Relational database exercisers (MySQL, PostgreSQL) via SQLAlchemy
"""
from typing import Callable

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool

from monitoring_demo.core.addresses import mysql_url, postgres_url
from monitoring_demo.exercisers.base import RESOURCE_NAME, Exerciser
from monitoring_demo.services.budget import KeepGoing

CREATE_TABLE = f"CREATE TABLE IF NOT EXISTS {RESOURCE_NAME} (i INT)"
INSERT_ROW = f"INSERT INTO {RESOURCE_NAME} VALUES (1)"
DROP_TABLE = f"DROP TABLE {RESOURCE_NAME}"


class SqlExerciser(Exerciser):
    """
    Synchronous loop over a single connection.

    Every statement runs in autocommit mode, so each insert is its own
    round trip and its own transaction on the server.
    """

    name = "sql"
    label = "SQL"
    has_schema = True

    def __init__(
        self,
        url: str,
        teardown: bool = True,
        engine_factory: Callable[..., Engine] = create_engine,
    ):
        super().__init__(self.normalize_url(url), teardown)
        self.engine_factory = engine_factory

    @staticmethod
    def normalize_url(url: str) -> str:
        return url

    def exercise(self, keep_going: KeepGoing) -> int:
        engine = self.engine_factory(self.url, poolclass=NullPool)
        iterations = 0

        try:
            with engine.connect() as conn:
                conn = conn.execution_options(isolation_level="AUTOCOMMIT")
                conn.execute(text(CREATE_TABLE))

                while keep_going():
                    conn.execute(text(INSERT_ROW))
                    iterations += 1

                if self.teardown:
                    conn.execute(text(DROP_TABLE))
        finally:
            engine.dispose()

        return iterations


class MySQLExerciser(SqlExerciser):
    name = "mysql"
    label = "MySQL"
    style = "btn-primary"

    @staticmethod
    def normalize_url(url: str) -> str:
        return mysql_url(url)


class PostgresExerciser(SqlExerciser):
    name = "pgsql"
    label = "PostgreSQL"
    style = "btn-success"

    @staticmethod
    def normalize_url(url: str) -> str:
        return postgres_url(url)
