"""
Document store exerciser (MongoDB)
"""
from typing import Callable

from pymongo import MongoClient

from monitoring_demo.core.addresses import with_scheme
from monitoring_demo.exercisers.base import Exerciser
from monitoring_demo.services.budget import KeepGoing

MONGODB_DEFAULT_DATABASE = "test"
MONGODB_COLLECTION = "demo"


class MongoDBExerciser(Exerciser):
    """insert_one per iteration into the `demo` collection, then drop it"""

    name = "mongodb"
    label = "MongoDB"
    style = "btn-warning"
    has_schema = True

    def __init__(
        self,
        url: str,
        teardown: bool = True,
        client_factory: Callable[[str], MongoClient] = MongoClient,
    ):
        super().__init__(with_scheme(url, "mongodb"), teardown)
        self.client_factory = client_factory

    def exercise(self, keep_going: KeepGoing) -> int:
        client = self.client_factory(self.url)
        i = 0

        try:
            # Database named in the URL, "test" otherwise
            collection = client.get_default_database(MONGODB_DEFAULT_DATABASE)[MONGODB_COLLECTION]

            while keep_going():
                collection.insert_one({"i": i})
                i += 1

            if self.teardown:
                collection.drop()
        finally:
            client.close()

        return i
