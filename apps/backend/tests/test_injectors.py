import logging
import sys
import time
import unittest
from datetime import timedelta
from http import HTTPStatus
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from asgi_helpers import (
    HANDLER_BODY,
    HANDLER_CODE,
    BrokenReporter,
    MarkInjector,
    NoopInjector,
    Recorder,
    RecordingReporter,
    make_scope,
    run_request,
)
from faultgate.errors import (
    EmptyInjectorListError,
    FaultConfigError,
    InvalidStatusCodeError,
    NilInjectorError,
    RequestAborted,
)
from faultgate.injectors import (
    ChainInjector,
    ErrorInjector,
    RandomInjector,
    RejectInjector,
    SlowInjector,
)
from faultgate.reporter import InjectorState, LoggingReporter, NoopReporter


class ErrorInjectorTests(unittest.IsolatedAsyncioTestCase):
    def test_new_error_injector(self):
        cases = [
            (500, None, "Internal Server Error"),
            (HANDLER_CODE, None, HANDLER_BODY),
            (201, HTTPStatus.ACCEPTED.phrase, "Accepted"),
            (418, "wow very random", "wow very random"),
        ]
        for code, text, want_text in cases:
            with self.subTest(code=code, text=text):
                ei = ErrorInjector(code, status_text=text)
                self.assertEqual(ei.status_code, code)
                self.assertEqual(ei.status_text, want_text)
                self.assertIsInstance(ei.reporter, NoopReporter)

    def test_invalid_status_codes_fail_construction(self):
        for code in (-1, 0, 1, 600, 120000, "500", None, True):
            with self.subTest(code=code):
                with self.assertRaises(InvalidStatusCodeError) as ctx:
                    ErrorInjector(code)
                self.assertIsInstance(ctx.exception, FaultConfigError)
                self.assertEqual(ctx.exception.error_type, "invalid_status_code")

    def test_invalid_status_text_fails_construction(self):
        for text in (123, b"bytes", ["Internal Server Error"]):
            with self.subTest(text=text):
                with self.assertRaises(FaultConfigError) as ctx:
                    ErrorInjector(500, status_text=text)
                self.assertEqual(ctx.exception.error_type, "invalid_status_text")

    async def test_handler_writes_status_and_text_without_calling_next(self):
        rec = await run_request(ErrorInjector(500))

        self.assertEqual(rec.status, 500)
        self.assertEqual(rec.body, "Internal Server Error")
        self.assertEqual(rec.downstream_calls, 0)
        self.assertEqual(rec.headers["content-type"], "text/plain; charset=utf-8")
        self.assertEqual(rec.headers["x-content-type-options"], "nosniff")

    async def test_handler_custom_text(self):
        rec = await run_request(ErrorInjector(503, status_text="very custom text"))

        self.assertEqual(rec.status, 503)
        self.assertEqual(rec.body, "very custom text")

    async def test_unusable_code_passes_through(self):
        ei = ErrorInjector(500)
        ei.status_code = 1

        rec = await run_request(ei)

        self.assertEqual(rec.status, HANDLER_CODE)
        self.assertEqual(rec.body, HANDLER_BODY)

    async def test_reports_started_and_finished(self):
        reporter = RecordingReporter()
        await run_request(ErrorInjector(500, reporter=reporter))

        self.assertEqual(
            reporter.events,
            [("ErrorInjector", InjectorState.STARTED), ("ErrorInjector", InjectorState.FINISHED)],
        )

    async def test_finished_is_reported_when_send_fails(self):
        reporter = RecordingReporter()
        app = ErrorInjector(500, reporter=reporter).handler(Recorder().downstream())

        async def send(message):
            raise RuntimeError("client went away")

        with self.assertRaises(RuntimeError):
            await app(make_scope(), Recorder.receive, send)

        self.assertEqual(reporter.states(), [InjectorState.STARTED, InjectorState.FINISHED])

    async def test_broken_reporter_does_not_fail_request(self):
        with self.assertLogs("faultgate.reporter", level="ERROR"):
            rec = await run_request(ErrorInjector(500, reporter=BrokenReporter()))

        self.assertEqual(rec.status, 500)


class SlowInjectorTests(unittest.IsolatedAsyncioTestCase):
    def test_new_slow_injector(self):
        cases = [
            (0, 0.0),
            (0.001, 0.001),
            (timedelta(seconds=1), 1.0),
            (timedelta(hours=1000000), 3600.0 * 1000000),
        ]
        for give, want in cases:
            with self.subTest(give=give):
                si = SlowInjector(give)
                self.assertEqual(si.duration, want)

    def test_invalid_duration_fails(self):
        for duration in (-0.5, timedelta(seconds=-1), float("nan"), "1", None, True):
            with self.subTest(duration=duration):
                with self.assertRaises(FaultConfigError) as ctx:
                    SlowInjector(duration)
                self.assertEqual(ctx.exception.error_type, "invalid_duration")

    async def test_waits_then_continues(self):
        waits: list[float] = []
        rec = await run_request(SlowInjector(3600, wait_func=waits.append))

        self.assertEqual(waits, [3600.0])
        self.assertEqual(rec.status, HANDLER_CODE)
        self.assertEqual(rec.body, HANDLER_BODY)
        self.assertEqual(rec.downstream_calls, 1)
        self.assertEqual(rec.trail, ["slow-injector"])

    async def test_async_wait_function_is_awaited(self):
        waits: list[float] = []

        async def wait(seconds):
            waits.append(seconds)

        rec = await run_request(SlowInjector(timedelta(minutes=1), wait_func=wait))

        self.assertEqual(waits, [60.0])
        self.assertEqual(rec.downstream_calls, 1)

    async def test_default_wait_sleeps(self):
        start = time.monotonic()
        rec = await run_request(SlowInjector(0.01))

        self.assertGreaterEqual(time.monotonic() - start, 0.009)
        self.assertEqual(rec.status, HANDLER_CODE)

    async def test_reports_around_the_wait(self):
        reporter = RecordingReporter()
        order: list[str] = []

        def wait(seconds):
            order.append(f"wait after {len(reporter.events)} events")

        await run_request(SlowInjector(1, wait_func=wait, reporter=reporter))

        self.assertEqual(order, ["wait after 1 events"])
        self.assertEqual(reporter.states(), [InjectorState.STARTED, InjectorState.FINISHED])


class RejectInjectorTests(unittest.IsolatedAsyncioTestCase):
    async def test_aborts_without_any_response(self):
        ri = RejectInjector()
        with self.assertRaises(RequestAborted):
            await run_request(ri)

    async def test_never_sends_a_message(self):
        rec = Recorder()
        app = RejectInjector().handler(rec.downstream())
        with self.assertRaises(RequestAborted):
            await app(make_scope(), rec.receive, rec.send)

        self.assertEqual(rec.messages, [])
        self.assertEqual(rec.downstream_calls, 0)

    async def test_reports_finished_before_aborting(self):
        reporter = RecordingReporter()
        with self.assertRaises(RequestAborted):
            await run_request(RejectInjector(reporter=reporter))

        self.assertEqual(
            reporter.events,
            [("RejectInjector", InjectorState.STARTED), ("RejectInjector", InjectorState.FINISHED)],
        )

    def test_abort_is_not_a_config_error(self):
        self.assertFalse(issubclass(RequestAborted, FaultConfigError))


class ChainInjectorTests(unittest.IsolatedAsyncioTestCase):
    def test_new_chain_injector(self):
        cases = [
            ("none", None, 0),
            ("empty", [], 0),
            ("one", [NoopInjector()], 1),
            ("two", [NoopInjector(), ErrorInjector(500)], 2),
        ]
        for name, give, want_len in cases:
            with self.subTest(name=name):
                ci = ChainInjector(give)
                self.assertEqual(len(ci.injectors), want_len)

    def test_none_entry_is_rejected_with_index(self):
        with self.assertRaises(NilInjectorError) as ctx:
            ChainInjector([NoopInjector(), None])
        self.assertEqual(ctx.exception.index, 1)

    def test_empty_chain_can_be_refused(self):
        with self.assertRaises(EmptyInjectorListError):
            ChainInjector([], allow_empty=False)

    async def test_empty_chain_passes_through(self):
        for give in (None, []):
            with self.subTest(give=give):
                rec = await run_request(ChainInjector(give))
                self.assertEqual(rec.status, HANDLER_CODE)
                self.assertEqual(rec.body, HANDLER_BODY)
                self.assertEqual(rec.trail, ["chain-injector"])

    async def test_steps_run_in_order(self):
        log: list[str] = []
        ci = ChainInjector([MarkInjector("one", log), NoopInjector(), MarkInjector("two", log)])

        rec = await run_request(ci)

        self.assertEqual(log, ["one", "two"])
        self.assertEqual(rec.downstream_calls, 1)
        self.assertEqual(rec.status, HANDLER_CODE)

    async def test_halting_step_stops_the_rest(self):
        log: list[str] = []
        ci = ChainInjector(
            [
                MarkInjector("one", log),
                MarkInjector("stop", log, halt=True),
                MarkInjector("two", log),
            ]
        )

        rec = await run_request(ci)

        self.assertEqual(log, ["one", "stop"])
        self.assertEqual(rec.downstream_calls, 0)
        self.assertEqual(rec.messages, [])

    async def test_error_mid_chain(self):
        log: list[str] = []
        ci = ChainInjector([MarkInjector("one", log), ErrorInjector(500), MarkInjector("two", log)])

        rec = await run_request(ci)

        self.assertEqual(log, ["one"])
        self.assertEqual(rec.status, 500)
        self.assertEqual(rec.body, "Internal Server Error")
        self.assertEqual(rec.downstream_calls, 0)

    async def test_slow_then_reject(self):
        waits: list[float] = []
        ci = ChainInjector([SlowInjector(1, wait_func=waits.append), RejectInjector()])

        with self.assertRaises(RequestAborted):
            await run_request(ci)
        self.assertEqual(waits, [1.0])

    async def test_handler_can_be_reused_across_requests(self):
        log: list[str] = []
        ci = ChainInjector([MarkInjector("one", log)])
        for _ in range(3):
            rec = await run_request(ci)
            self.assertEqual(rec.downstream_calls, 1)
        self.assertEqual(log, ["one", "one", "one"])


class RandomInjectorTests(unittest.IsolatedAsyncioTestCase):
    def test_new_random_injector(self):
        cases = [
            ("none", None, 0),
            ("empty", [], 0),
            ("one", [NoopInjector()], 1),
            ("two", [NoopInjector(), ErrorInjector(500)], 2),
        ]
        for name, give, want_len in cases:
            with self.subTest(name=name):
                ri = RandomInjector(give)
                self.assertEqual(len(ri.injectors), want_len)
                self.assertEqual(ri.rand.seed, 1)

        self.assertEqual(RandomInjector([NoopInjector()], rand_seed=100).rand.seed, 100)

    def test_none_entry_is_rejected_with_index(self):
        with self.assertRaises(NilInjectorError) as ctx:
            RandomInjector([None, NoopInjector()])
        self.assertEqual(ctx.exception.index, 0)

    def test_empty_choices_can_be_refused(self):
        with self.assertRaises(EmptyInjectorListError):
            RandomInjector(None, allow_empty=False)

    async def test_empty_choices_pass_through(self):
        for give in (None, []):
            with self.subTest(give=give):
                rec = await run_request(RandomInjector(give))
                self.assertEqual(rec.status, HANDLER_CODE)
                self.assertEqual(rec.body, HANDLER_BODY)

    async def test_rand_int_func_picks_the_choice(self):
        log: list[str] = []
        choices = [MarkInjector("one", log), MarkInjector("two", log)]

        rec = await run_request(RandomInjector(choices, rand_int_func=lambda n: 1))

        self.assertEqual(log, ["two"])
        self.assertEqual(rec.downstream_calls, 1)
        self.assertEqual(rec.trail, ["random-injector"])

    async def test_exactly_one_choice_runs_per_request(self):
        log: list[str] = []
        ri = RandomInjector([MarkInjector(str(i), log) for i in range(7)])

        for _ in range(50):
            await run_request(ri)

        self.assertEqual(len(log), 50)
        self.assertTrue(set(log) <= {str(i) for i in range(7)})

    async def test_same_seed_same_selections(self):
        first_log: list[str] = []
        second_log: list[str] = []
        first = RandomInjector([MarkInjector(str(i), first_log) for i in range(7)])
        second = RandomInjector([MarkInjector(str(i), second_log) for i in range(7)])

        for _ in range(100):
            await run_request(first)
            await run_request(second)

        self.assertEqual(first_log, second_log)
        # uniform over many draws, every choice gets picked
        self.assertEqual(set(first_log), {str(i) for i in range(7)})

    async def test_error_choice(self):
        ri = RandomInjector([ErrorInjector(418), ErrorInjector(500)], rand_int_func=lambda n: 0)

        rec = await run_request(ri)

        self.assertEqual(rec.status, 418)
        self.assertEqual(rec.body, HTTPStatus(418).phrase)


class LoggingReporterTests(unittest.IsolatedAsyncioTestCase):
    async def test_logs_to_the_given_logger(self):
        reporter = LoggingReporter(logger=logging.getLogger("faultgate.tests.events"), level=logging.WARNING)

        with self.assertLogs("faultgate.tests.events", level="WARNING") as logs:
            await run_request(ErrorInjector(503, reporter=reporter))

        self.assertEqual(len(logs.records), 2)
        self.assertIn("ErrorInjector started", logs.output[0])
        self.assertIn("ErrorInjector finished", logs.output[1])

    def test_defaults_to_module_logger(self):
        reporter = LoggingReporter()
        self.assertEqual(reporter.logger.name, "faultgate.reporter")
        self.assertEqual(reporter.level, logging.INFO)


if __name__ == "__main__":
    unittest.main()
