"""Tests for product image storage"""
import re
from types import SimpleNamespace

import httpx
import pytest

from octamart import config
from octamart.errors import ValidationError
from octamart.services.storage import ImageStorage, unique_file_name, validate_image

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class TestValidation:
    def test_accepts_png(self):
        validate_image(PNG, "image/png")

    def test_empty_file(self):
        with pytest.raises(ValidationError):
            validate_image(b"", "image/png")

    def test_wrong_type(self):
        with pytest.raises(ValidationError):
            validate_image(b"%PDF-1.4", "application/pdf")

    def test_too_large(self, monkeypatch):
        monkeypatch.setattr(config, "MAX_UPLOAD_SIZE", 16)
        with pytest.raises(ValidationError):
            validate_image(PNG, "image/png")


class TestFileName:
    def test_format(self):
        assert re.fullmatch(r"\d{13}-[0-9a-f]{8}\.jpg", unique_file_name("image/jpeg"))

    def test_extension_from_content_type(self):
        assert unique_file_name("image/webp").endswith(".webp")
        assert unique_file_name("IMAGE/GIF").endswith(".gif")

    def test_names_differ(self):
        assert unique_file_name("image/png") != unique_file_name("image/png")


class TestImageStorage:
    @pytest.mark.asyncio
    async def test_upload_returns_public_url(self, supabase):
        storage = ImageStorage(supabase, bucket="product-images")

        result = await storage.upload(PNG, "image/png", filename="sepatu.png", folder="products/shoes")

        assert result["path"].startswith("products/shoes/")
        assert result["path"].endswith(result["fileName"])
        assert result["url"].endswith(f"/product-images/{result['path']}")
        assert supabase.storage.files[("product-images", result["path"])] == PNG

    @pytest.mark.asyncio
    async def test_client_extension_ignored(self, supabase):
        result = await ImageStorage(supabase).upload(PNG, "image/png", filename="shell.php")

        assert result["fileName"].endswith(".png")
        assert not result["path"].endswith(".php")

    @pytest.mark.asyncio
    async def test_folder_cannot_escape(self, supabase):
        result = await ImageStorage(supabase).upload(PNG, "image/png", folder="../../etc")

        assert result["path"].startswith("etc/")

    @pytest.mark.asyncio
    async def test_default_folder(self, supabase):
        result = await ImageStorage(supabase).upload(PNG, "image/png")

        assert result["path"].startswith(f"{config.STORAGE_DEFAULT_FOLDER}/")

    @pytest.mark.asyncio
    async def test_delete(self, supabase):
        storage = ImageStorage(supabase, bucket="product-images")
        result = await storage.upload(PNG, "image/png")

        await storage.delete(result["path"])

        assert supabase.storage.files == {}

    @pytest.mark.asyncio
    async def test_delete_requires_path(self, supabase):
        with pytest.raises(ValidationError):
            await ImageStorage(supabase).delete("")

    @pytest.mark.asyncio
    async def test_ensure_bucket(self, supabase):
        storage = ImageStorage(supabase, bucket="product-images")

        assert await storage.ensure_bucket() is True
        assert supabase.storage.buckets[0].options["public"] is True
        assert await storage.ensure_bucket() is False

    @pytest.mark.asyncio
    async def test_ensure_bucket_existing(self, supabase):
        supabase.storage.buckets.append(SimpleNamespace(name="product-images"))

        assert await ImageStorage(supabase, bucket="product-images").ensure_bucket() is False


def remote(status=200, content=PNG, content_type="image/png"):
    """Transport serving one fixed response for every request"""
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(status, content=content, headers={"content-type": content_type})

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    return transport


class TestUploadFromUrl:
    @pytest.mark.asyncio
    async def test_copies_remote_image(self, supabase):
        transport = remote(content_type="image/png; charset=binary")
        storage = ImageStorage(supabase, bucket="product-images", http_transport=transport)

        result = await storage.upload_from_url("https://cdn.example.com/sepatu.php", folder="products")

        assert result["path"].startswith("products/")
        assert result["fileName"].endswith(".png")
        assert result["originalUrl"] == "https://cdn.example.com/sepatu.php"
        assert supabase.storage.files[("product-images", result["path"])] == PNG
        assert str(transport.requests[0].url) == "https://cdn.example.com/sepatu.php"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["", "   ", None, "ftp://cdn.example.com/a.png", "not a url"])
    async def test_rejects_bad_url(self, supabase, url):
        transport = remote()

        with pytest.raises(ValidationError):
            await ImageStorage(supabase, http_transport=transport).upload_from_url(url)
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_remote_error(self, supabase):
        storage = ImageStorage(supabase, http_transport=remote(status=404))

        with pytest.raises(ValidationError) as exc_info:
            await storage.upload_from_url("https://cdn.example.com/missing.png")
        assert "Failed to download image" in exc_info.value.message
        assert supabase.storage.files == {}

    @pytest.mark.asyncio
    async def test_remote_not_an_image(self, supabase):
        storage = ImageStorage(supabase, http_transport=remote(content=b"<html>", content_type="text/html"))

        with pytest.raises(ValidationError):
            await storage.upload_from_url("https://cdn.example.com/page")

    @pytest.mark.asyncio
    async def test_remote_too_large(self, supabase, monkeypatch):
        monkeypatch.setattr(config, "MAX_UPLOAD_SIZE", 16)
        storage = ImageStorage(supabase, http_transport=remote())

        with pytest.raises(ValidationError) as exc_info:
            await storage.upload_from_url("https://cdn.example.com/big.png")
        assert "too large" in exc_info.value.message
        assert supabase.storage.files == {}

    @pytest.mark.asyncio
    async def test_connection_failure(self, supabase):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        storage = ImageStorage(supabase, http_transport=httpx.MockTransport(refuse))

        with pytest.raises(ValidationError):
            await storage.upload_from_url("https://cdn.example.com/a.png")
