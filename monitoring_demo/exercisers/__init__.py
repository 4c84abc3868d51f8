"""
Backend exercisers and the registry that wires them to settings
"""
from typing import Dict

from monitoring_demo.core.config import BACKENDS, Settings
from monitoring_demo.exercisers.base import Exerciser, RunResult
from monitoring_demo.exercisers.cache import MemcacheExerciser, RedisExerciser
from monitoring_demo.exercisers.cassandra import CassandraExerciser
from monitoring_demo.exercisers.mongodb import MongoDBExerciser
from monitoring_demo.exercisers.rabbitmq import RabbitMQExerciser
from monitoring_demo.exercisers.sql import MySQLExerciser, PostgresExerciser

EXERCISER_CLASSES = {
    "mysql": MySQLExerciser,
    "pgsql": PostgresExerciser,
    "redis": RedisExerciser,
    "memcache": MemcacheExerciser,
    "mongodb": MongoDBExerciser,
    "cassandra": CassandraExerciser,
    "rabbitmq": RabbitMQExerciser,
}


def build_exercisers(settings: Settings) -> Dict[str, Exerciser]:
    """Create one exerciser per backend, in index page order"""
    exercisers: Dict[str, Exerciser] = {}

    for name in BACKENDS:
        backend = settings.backend(name)
        kwargs = {"teardown": backend.teardown}
        if name == "rabbitmq":
            kwargs["consume_timeout"] = settings.RABBITMQ_CONSUME_TIMEOUT

        exercisers[name] = EXERCISER_CLASSES[name](backend.url, **kwargs)

    return exercisers


__all__ = [
    "Exerciser",
    "RunResult",
    "build_exercisers",
    "EXERCISER_CLASSES",
    "MySQLExerciser",
    "PostgresExerciser",
    "RedisExerciser",
    "MemcacheExerciser",
    "MongoDBExerciser",
    "CassandraExerciser",
    "RabbitMQExerciser",
]
