"""
Pytest fixtures for DataMagic tests.
"""

import pytest
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from elasticsearch import ConnectionError, SerializationError

from datamagic import DataMagic, DataConfig, Settings, ZipcodeGeocoder
from datamagic.query import QueryCompiler


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: tests exercising import, search and the server together"
    )


# Zip codes used by location tests, pinned so coordinates are exact
ZIPCODE_TABLE = {
    "94132": (37.7211, -122.4754),
    "10001": (40.7506, -73.9972),
    "02139": (42.3647, -71.1042),
}


class FakeIndices:
    """Records index administration calls."""

    def __init__(self, client: "FakeClient", fail_refreshes: int = 0):
        self._client = client
        self._fail_refreshes = fail_refreshes
        self.refreshed: List[str] = []
        self.deleted: List[str] = []
        self.cache_clears = 0

    def refresh(self, index: str) -> None:
        if self._fail_refreshes > 0:
            self._fail_refreshes -= 1
            raise ConnectionError(f"refresh of {index} timed out")
        self.refreshed.append(index)

    def delete(self, index: str) -> None:
        self.deleted.append(index)
        self._client.documents.pop(index, None)

    def clear_cache(self) -> None:
        self.cache_clears += 1

    def get(self, index: str) -> Dict[str, Any]:
        prefix = index.rstrip("*")
        return {name: {} for name in self._client.documents if name.startswith(prefix)}


class FakeClient:
    """
    In-memory stand-in for the search engine client.

    Stores indexed documents per index and answers searches with the
    stored documents, paginated by the request's from/size.
    """

    def __init__(
        self,
        reject: Optional[Callable[[Dict[str, Any]], bool]] = None,
        fail_refreshes: int = 0,
    ):
        self.documents: Dict[str, List[Dict[str, Any]]] = {}
        self.searches: List[Dict[str, Any]] = []
        self.indices = FakeIndices(self, fail_refreshes)
        self._reject = reject

    def index(self, index: str, document: Dict[str, Any]) -> Dict[str, Any]:
        if self._reject is not None and self._reject(document):
            raise SerializationError(f"rejected document {document}")
        self.documents.setdefault(index, []).append(document)
        return {"result": "created"}

    def search(self, index: str, body: Dict[str, Any]) -> Dict[str, Any]:
        self.searches.append({"index": index, "body": body})
        start = body.get("from", 0)
        docs = self.documents.get(index, [])[start:start + body.get("size", 20)]
        return {"hits": {"total": {"value": len(docs)}, "hits": [{"_source": d} for d in docs]}}

    def ping(self) -> bool:
        return True


@pytest.fixture
def fake_client() -> FakeClient:
    """Empty fake search engine client."""
    return FakeClient()


@pytest.fixture
def data_config() -> DataConfig:
    """Dataset configuration with a name field and an integer field."""
    return DataConfig.from_dict({
        "index": "city-data",
        "types": {"city": "name", "age": "integer"},
        "files": {"cities.csv": {"api": "cities"}},
    })


@pytest.fixture
def geocoder() -> ZipcodeGeocoder:
    """Geocoder over a small pinned zip code table."""
    return ZipcodeGeocoder(ZIPCODE_TABLE)


@pytest.fixture
def compiler(data_config: DataConfig, geocoder: ZipcodeGeocoder) -> QueryCompiler:
    """Query compiler over the test dataset configuration."""
    return QueryCompiler(data_config, geocoder)


@pytest.fixture
def settings() -> Settings:
    """Settings scoped to the test environment."""
    return Settings(env="test")


@pytest.fixture
def datamagic(
    settings: Settings,
    fake_client: FakeClient,
    data_config: DataConfig,
    geocoder: ZipcodeGeocoder,
) -> DataMagic:
    """DataMagic facade over the fake client."""
    return DataMagic(settings, client=fake_client, data_config=data_config, geocoder=geocoder)


CITIES_CSV = """NAME, STATE , POPULATION
San Francisco,CA,805235
Los Angeles,CA,3792621
New York,NY,8175133
Boston,MA,617594
"""

DATA_YAML = """
index: city-data
types:
  city: name
files:
  cities.csv:
    api: cities
    fields:
      NAME: city
      STATE: state
      POPULATION: population
"""


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data directory with a data.yaml, a good CSV and an empty CSV."""
    (tmp_path / "data.yaml").write_text(DATA_YAML)
    (tmp_path / "cities.csv").write_text(CITIES_CSV)
    nested = tmp_path / "more"
    nested.mkdir()
    (nested / "empty.csv").write_text("NAME,STATE\n")
    return tmp_path


@pytest.fixture
def cities_csv() -> str:
    """CSV text of four cities with a padded header."""
    return CITIES_CSV


@pytest.fixture
def client_factory() -> Callable[..., FakeClient]:
    """Builds fake clients, e.g. ones that reject some documents."""
    return FakeClient
