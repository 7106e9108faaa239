"""Keyed record store on top of YamlDatabase.

Concrete databases subclass ``TypesafeYamlDatabase``, name their default
file and implement ``parse_body_node``. Because import files are read
after base files, a record ``put`` from the import file replaces the base
record with the same key.
"""

from abc import ABC, abstractmethod
from typing import Dict, Generic, Iterator, Optional, Tuple, TypeVar

from yamldb.codes import DatabaseLocation
from yamldb.contracts import ParseResult
from yamldb.kernel.loader import YamlDatabase
from yamldb.kernel.node import Node

K = TypeVar("K")
V = TypeVar("V")


class TypesafeYamlDatabase(YamlDatabase, ABC, Generic[K, V]):
    """A YamlDatabase that keeps parsed records in a dict keyed by K."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._data: Dict[K, V] = {}

    @abstractmethod
    def default_location(self) -> Tuple[str, DatabaseLocation]:
        """Logical file name and location of this database."""

    @abstractmethod
    def parse_body_node(self, node: Node, path: str) -> bool:
        """Turn one body entry into a record; return whether it was ingested."""

    def loading_finished(self) -> None:
        """Hook run after every ``load_default``, successful or not."""

    def load_default(self) -> ParseResult:
        filename, location = self.default_location()
        result = self.parse(filename, location, self.parse_body_node)
        self.loading_finished()
        return result

    def reload(self) -> ParseResult:
        self.clear()
        return self.load_default()

    def clear(self) -> None:
        self._data.clear()

    def exists(self, key: K) -> bool:
        return key in self._data

    def find(self, key: K) -> Optional[V]:
        return self._data.get(key)

    def put(self, key: K, record: V) -> None:
        self._data[key] = record

    def erase(self, key: K) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        return True

    def size(self) -> int:
        return len(self._data)

    def items(self) -> Iterator[Tuple[K, V]]:
        return iter(self._data.items())

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)
