"""Tests for src/search/es_client.py."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from src.config import Config
from src.errors import InfrastructureError
from src.search.es_client import build_es_client, create_es_client, wait_for_elasticsearch


class TestBuildEsClient:
    """Tests for client construction."""

    @patch("src.search.es_client.Elasticsearch")
    def test_local_url(self, mock_cls: MagicMock) -> None:
        config = Config(elasticsearch_url="http://es:9200", elastic_cloud_id=None, elastic_api_key=None)
        build_es_client(config)
        mock_cls.assert_called_once_with("http://es:9200")

    @patch("src.search.es_client.Elasticsearch")
    def test_cloud_id_wins(self, mock_cls: MagicMock) -> None:
        config = Config(elastic_cloud_id="deployment:abc", elastic_api_key="key")
        build_es_client(config)
        mock_cls.assert_called_once_with(cloud_id="deployment:abc", api_key="key")

    @patch("src.search.es_client.Elasticsearch")
    def test_url_with_api_key(self, mock_cls: MagicMock) -> None:
        config = Config(elasticsearch_url="https://es:9200", elastic_cloud_id=None, elastic_api_key="key")
        build_es_client(config)
        mock_cls.assert_called_once_with("https://es:9200", api_key="key")


class TestCreateEsClient:
    """Tests for verified client creation."""

    @patch("src.search.es_client.Elasticsearch")
    def test_returns_client_when_reachable(self, mock_cls: MagicMock) -> None:
        mock_cls.return_value.ping.return_value = True
        assert create_es_client(Config(elastic_cloud_id=None)) is mock_cls.return_value

    @patch("src.search.es_client.Elasticsearch")
    def test_unreachable_raises(self, mock_cls: MagicMock) -> None:
        mock_cls.return_value.ping.return_value = False
        with pytest.raises(InfrastructureError):
            create_es_client(Config(elastic_cloud_id=None))


class TestWaitForElasticsearch:
    """Tests for readiness polling."""

    @patch("src.search.es_client.time.sleep")
    @patch("src.search.es_client.Elasticsearch")
    def test_ready_after_retries(self, mock_cls: MagicMock, mock_sleep: MagicMock) -> None:
        mock_cls.return_value.ping.side_effect = [False, False, True]
        assert wait_for_elasticsearch(Config(elastic_cloud_id=None), timeout=60) is True
        assert mock_sleep.call_count == 2

    @patch("src.search.es_client.Elasticsearch")
    def test_gives_up_after_timeout(self, mock_cls: MagicMock) -> None:
        mock_cls.return_value.ping.return_value = False
        assert wait_for_elasticsearch(Config(elastic_cloud_id=None), timeout=0) is False
