import asyncio

from pymongo.errors import ExecutionTimeout

from app.models.analytics import UsageTrends, SystemDashboard
from app.services.fallback import (
    run_with_fallback,
    USAGE_TRENDS_FALLBACK,
    SYSTEM_DASHBOARD_FALLBACK,
)


def test_fixtures_match_response_schema():
    UsageTrends(**USAGE_TRENDS_FALLBACK)
    SystemDashboard(**SYSTEM_DASHBOARD_FALLBACK)


def test_fixture_lists_sorted_descending():
    struggles = [s["studentCount"] for s in USAGE_TRENDS_FALLBACK["commonStruggles"]]
    top = [q["askCount"] for q in SYSTEM_DASHBOARD_FALLBACK["topQuestions"]]

    assert struggles == sorted(struggles, reverse=True)
    assert top == sorted(top, reverse=True)


async def test_live_result_returned():
    async def query():
        return {"activeStudents": 7}

    assert await run_with_fallback("test", query, USAGE_TRENDS_FALLBACK) == {"activeStudents": 7}


async def test_store_error_returns_fixture_copy():
    async def query():
        raise ExecutionTimeout("operation exceeded time limit")

    result = await run_with_fallback("test", query, USAGE_TRENDS_FALLBACK)
    assert result == USAGE_TRENDS_FALLBACK

    result["commonStruggles"].clear()
    assert len(USAGE_TRENDS_FALLBACK["commonStruggles"]) == 5


async def test_slow_query_returns_fixture():
    async def query():
        await asyncio.sleep(1)
        return {"late": True}

    result = await run_with_fallback("test", query, SYSTEM_DASHBOARD_FALLBACK, timeout=0.01)

    assert result == SYSTEM_DASHBOARD_FALLBACK
