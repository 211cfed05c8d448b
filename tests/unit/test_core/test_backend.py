"""Tests for the backend collaborator lifecycle."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from thinktank_api.core import backend as backend_module
from thinktank_api.core.backend import build_backend, dispose_backend, get_backend, init_backend
from thinktank_api.core.config import Settings


@pytest.fixture(autouse=True)
def _reset_backend():
    backend_module._backend = None
    yield
    backend_module._backend = None


class TestBackendLifecycle:
    def test_get_backend_before_init_raises(self) -> None:
        with pytest.raises(RuntimeError, match="not initialized"):
            get_backend()

    async def test_init_and_dispose(self, settings: Settings) -> None:
        http = httpx.AsyncClient(base_url=settings.backend_url)

        backend = init_backend(settings, http=http, storage_client=MagicMock())

        assert get_backend() is backend
        assert backend.service_store is None
        await dispose_backend()
        assert http.is_closed
        with pytest.raises(RuntimeError):
            get_backend()

    async def test_dispose_without_init_is_noop(self) -> None:
        await dispose_backend()

    async def test_service_store_built_from_service_key(self, settings: Settings) -> None:
        settings = settings.model_copy(update={"backend_service_key": "service-key"})
        http = httpx.AsyncClient(base_url=settings.backend_url)

        backend = build_backend(settings, http=http, storage_client=MagicMock())

        assert backend.service_store is not None
        await backend.close()

    async def test_storage_client_created_from_settings(self, settings: Settings) -> None:
        http = httpx.AsyncClient(base_url=settings.backend_url)
        with patch("thinktank_api.core.backend.create_storage_client") as mock_create:
            backend = build_backend(settings, http=http)

        mock_create.assert_called_once_with(
            "https://backend.test/storage/v1/s3",
            None,
            None,
            "us-east-1",
        )
        url = backend.storage.get_public_url("admin-uploads", "a.pdf")
        assert url == "https://storage.test/public/admin-uploads/a.pdf"
        await backend.close()
