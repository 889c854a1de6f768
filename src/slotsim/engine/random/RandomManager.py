"""
Owner of the random streams of one simulation run.

Every stream is a Philox generator seeded from a stable hash of its key, the
worker id and the root seed, so a component always gets the same sequence for
the same seed regardless of which other streams exist. Replications of a sweep
use distinct root seeds; parallel workers also get distinct worker ids.
"""

from numpy.random import Generator, Philox
from slotsim.engine.random.RandomGenerator import RandomGenerator
import hashlib
from typing import Dict, List


class RandomManager:
    def __init__(
        self, root_seed: int = 0, worker_id: int = 0, antithetic: bool = False
    ) -> None:
        self.root_seed = root_seed
        self.worker_id = worker_id
        self.antithetic = antithetic
        self._streams: Dict[str, RandomGenerator] = {}

    def _stream_seed(self, key: str) -> List[int]:
        key_hash = int.from_bytes(hashlib.sha256(key.encode()).digest(), "little")
        return [key_hash, self.worker_id, self.root_seed]

    def create_stream(self, key: str) -> RandomGenerator:
        key = key.lower()
        if key in self._streams:
            raise ValueError(f"Stream with key '{key}' already exists.")

        native_stream = Generator(Philox(self._stream_seed(key)))
        self._streams[key] = RandomGenerator(
            native_stream=native_stream, is_antithetic=self.antithetic
        )
        return self._streams[key]

    def get_stream(self, key: str) -> RandomGenerator:
        key = key.lower()
        if key not in self._streams:
            raise ValueError(f"Stream with key '{key}' does not exist.")
        return self._streams[key]

    def get_or_create_stream(self, key: str) -> RandomGenerator:
        if key.lower() in self._streams:
            return self.get_stream(key)
        return self.create_stream(key)
