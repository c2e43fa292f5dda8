import pytest
from tx_router.reporters import LogReporter, ReporterFactory, SQSReporter
from tx_router.reporters.base import Reporter
from tx_router.utils.exceptions import UnsupportedTypeError


class MockReporter(Reporter):
    def __init__(self, **kwargs):
        self.kwargs = kwargs

    def init(self):
        pass

    def name(self):
        return self.kwargs.get("name", "mock")

    def enabled(self):
        return True

    def send(self, report):
        pass


class TestReporterFactory:
    """Test cases for ReporterFactory"""

    @pytest.fixture(autouse=True)
    def reset_registry(self):
        """Reset the registry after each test."""
        original_registry = ReporterFactory.REGISTRY.copy()
        yield
        ReporterFactory.REGISTRY = original_registry

    def test_builtin_reporters_registered(self):
        assert ReporterFactory.REGISTRY["log"] is LogReporter
        assert ReporterFactory.REGISTRY["sqs"] is SQSReporter

    def test_register_reporter(self):
        ReporterFactory.register_reporter("Mock", MockReporter)

        assert "mock" in ReporterFactory.REGISTRY
        assert ReporterFactory.REGISTRY["mock"] == MockReporter

    def test_create_passes_kwargs(self):
        ReporterFactory.register_reporter("mock", MockReporter)

        reporter = ReporterFactory.create("MOCK", name="alerts", channel="ops")

        assert isinstance(reporter, MockReporter)
        assert reporter.name() == "alerts"
        assert reporter.kwargs["channel"] == "ops"

    def test_create_log_reporter(self):
        reporter = ReporterFactory.create("log", name="console")

        assert isinstance(reporter, LogReporter)
        assert reporter.name() == "console"

    def test_create_unsupported_reporter(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            ReporterFactory.create("telegram")

        assert "Unsupported reporter type: telegram" in str(exc_info.value)
        assert "Supported types" in str(exc_info.value)
