"""
Tests for node metadata lookups.
"""

import httpx
import pytest

from simvex.core.exceptions import NodeNotFoundException, RetrievalFailedException
from simvex.models.project import Project
from simvex.services.node_service import NodeMetadataResolver

SCENE_URL = "https://cdn.test/projects/p1/scene.json"


def project_with(json_file_url: str | None) -> Project:
    return Project(id="p1", team_id="t1", name="Car", storage_scheme="v2", json_file_url=json_file_url)


def resolver_for(handler) -> tuple[NodeMetadataResolver, list[httpx.Request]]:
    requests = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    return NodeMetadataResolver(transport=httpx.MockTransport(recording_handler)), requests


@pytest.mark.asyncio
async def test_get_node_returns_sub_document():
    resolver, _ = resolver_for(lambda request: httpx.Response(200, json={"wheel": {"mass": 12}}))

    assert await resolver.get_node(project_with(SCENE_URL), "wheel") == {"mass": 12}


@pytest.mark.asyncio
async def test_get_node_passes_any_json_through():
    document = {"tags": ["a", "b"], "count": 3, "empty": None}
    resolver, _ = resolver_for(lambda request: httpx.Response(200, json=document))
    project = project_with(SCENE_URL)

    assert await resolver.get_node(project, "tags") == ["a", "b"]
    assert await resolver.get_node(project, "count") == 3
    assert await resolver.get_node(project, "empty") is None


@pytest.mark.asyncio
async def test_missing_node():
    resolver, _ = resolver_for(lambda request: httpx.Response(200, json={"wheel": {"mass": 12}}))

    with pytest.raises(NodeNotFoundException):
        await resolver.get_node(project_with(SCENE_URL), "missing")


@pytest.mark.asyncio
async def test_nested_keys_are_not_searched():
    resolver, _ = resolver_for(lambda request: httpx.Response(200, json={"car": {"wheel": {}}}))

    with pytest.raises(NodeNotFoundException):
        await resolver.get_node(project_with(SCENE_URL), "wheel")


@pytest.mark.asyncio
async def test_project_without_metadata():
    resolver, requests = resolver_for(lambda request: httpx.Response(200, json={}))

    with pytest.raises(NodeNotFoundException):
        await resolver.get_node(project_with(None), "wheel")
    assert requests == []


@pytest.mark.parametrize("status", [404, 410])
@pytest.mark.asyncio
async def test_absent_document(status: int):
    resolver, _ = resolver_for(lambda request: httpx.Response(status))

    with pytest.raises(NodeNotFoundException):
        await resolver.get_node(project_with(SCENE_URL), "wheel")


@pytest.mark.parametrize("status", [403, 500, 503])
@pytest.mark.asyncio
async def test_fetch_failure(status: int):
    resolver, _ = resolver_for(lambda request: httpx.Response(status))

    with pytest.raises(RetrievalFailedException):
        await resolver.get_node(project_with(SCENE_URL), "wheel")


@pytest.mark.asyncio
async def test_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    resolver, _ = resolver_for(handler)

    with pytest.raises(RetrievalFailedException):
        await resolver.get_node(project_with(SCENE_URL), "wheel")


@pytest.mark.asyncio
async def test_invalid_json():
    resolver, _ = resolver_for(lambda request: httpx.Response(200, content=b"not json"))

    with pytest.raises(RetrievalFailedException):
        await resolver.get_node(project_with(SCENE_URL), "wheel")


@pytest.mark.asyncio
async def test_document_is_fetched_on_every_call():
    resolver, requests = resolver_for(lambda request: httpx.Response(200, json={"wheel": 1}))
    project = project_with(SCENE_URL)

    await resolver.get_node(project, "wheel")
    await resolver.get_node(project, "wheel")

    assert len(requests) == 2
    assert str(requests[0].url) == SCENE_URL
