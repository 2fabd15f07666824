import logging

import pytest

from shopwatch.shared.result import Result, attempt, run_fallback_chain


async def _value(value):
    return value


async def _raise(error):
    raise error


class TestResult:

    def test_success_and_failure(self):
        ok = Result.success(3)
        failed = Result.failure(ValueError("nope"))

        assert ok and ok.value == 3 and ok.error is None
        assert not failed and failed.value is None
        assert failed.unwrap_or(7) == 7
        assert ok.unwrap_or(7) == 3

    @pytest.mark.asyncio
    async def test_attempt_captures_exception(self):
        result = await attempt(_raise(KeyError("gone")))

        assert not result.ok
        assert isinstance(result.error, KeyError)

    @pytest.mark.asyncio
    async def test_attempt_treats_none_as_not_found(self):
        result = await attempt(_value(None))

        assert not result.ok
        assert isinstance(result.error, LookupError)

    @pytest.mark.asyncio
    async def test_attempt_success(self):
        assert (await attempt(_value("x"))).value == "x"


class TestFallbackChain:

    @pytest.mark.asyncio
    async def test_runs_every_step_in_order(self):
        calls = []

        async def first():
            calls.append(1)

        async def second():
            calls.append(2)
            raise RuntimeError("second failed")

        async def third():
            calls.append(3)

        completed = await run_fallback_chain([first, second, third])

        assert calls == [1, 2, 3]
        assert completed == 2

    @pytest.mark.asyncio
    async def test_failed_step_is_logged(self, caplog):
        caplog.set_level(logging.WARNING)

        async def broken():
            raise RuntimeError("no luck")

        await run_fallback_chain([broken], description="report")

        assert "report step 1 failed: no luck" in [record.getMessage() for record in caplog.records]
