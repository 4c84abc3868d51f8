"""
Column store exerciser (Cassandra)
"""
from typing import Any, Callable

from monitoring_demo.core.addresses import cassandra_address
from monitoring_demo.exercisers.base import RESOURCE_NAME, Exerciser
from monitoring_demo.services.budget import KeepGoing


def _cassandra_cluster(hosts, port) -> Any:
    # Imported lazily: the driver picks its event loop reactor at import time
    from cassandra.cluster import Cluster

    return Cluster(contact_points=hosts, port=port)


class CassandraExerciser(Exerciser):
    """Insert one row per iteration into a keyed table, then drop it"""

    name = "cassandra"
    label = "Cassandra"
    style = "btn-default"
    has_schema = True

    CREATE_TABLE = f"CREATE TABLE IF NOT EXISTS {RESOURCE_NAME} (id int PRIMARY KEY)"
    INSERT_ROW = f"INSERT INTO {RESOURCE_NAME} (id) VALUES (%s)"
    DROP_TABLE = f"DROP TABLE {RESOURCE_NAME}"

    def __init__(
        self,
        url: str,
        teardown: bool = True,
        cluster_factory: Callable[..., Any] = _cassandra_cluster,
    ):
        super().__init__(url, teardown)
        self.hosts, self.port, self.keyspace = cassandra_address(url)
        self.cluster_factory = cluster_factory

    def exercise(self, keep_going: KeepGoing) -> int:
        cluster = self.cluster_factory(self.hosts, self.port)
        i = 0

        try:
            session = cluster.connect(self.keyspace)
            session.execute(self.CREATE_TABLE)

            while keep_going():
                session.execute(self.INSERT_ROW, (i,))
                i += 1

            if self.teardown:
                session.execute(self.DROP_TABLE)
        finally:
            cluster.shutdown()

        return i
