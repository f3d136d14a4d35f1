"""Session state operations running concurrently for one session."""

import asyncio

import pytest

from src.application.state.session import SessionStateService
from src.domains.file_search.models import QueryResponse
from src.domains.state.schemas import ModelUpdateRequest
from src.infra.state.repository import StateRepository
from tests.fakes import InterleavingRedis


@pytest.fixture
def service():
    return SessionStateService(StateRepository(InterleavingRedis()))


@pytest.mark.asyncio
async def test_parallel_queries_are_all_recorded(service):
    await asyncio.gather(
        service.record_query("s1", "store", "q1", QueryResponse(text="a1")),
        service.record_query("s1", "store", "q2", QueryResponse(text="a2")),
    )

    state = await service.get("s1")
    assert sorted(item.query for item in state.query.history) == ["q1", "q2"]


@pytest.mark.asyncio
async def test_query_and_model_update_both_survive(service):
    await asyncio.gather(
        service.record_query("s1", "store", "q1", QueryResponse(text="a1")),
        service.update_model("s1", ModelUpdateRequest(temperature=0.7)),
    )

    state = await service.get("s1")
    assert state.model.temperature == 0.7
    assert [item.query for item in state.query.history] == ["q1"]
    assert state.query.current_result.text == "a1"


@pytest.mark.asyncio
async def test_other_sessions_are_untouched(service):
    await service.set_api_key("s1", "k1")
    await service.set_api_key("s2", "k2")
    await service.clear_api_key("s1")

    assert not (await service.get("s1")).has_api_key()
    assert (await service.get("s2")).auth.api_key == "k2"
