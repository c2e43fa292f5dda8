from tx_router.metrics import MetricsManager


class TestMetricsManager:
    """Test cases for MetricsManager"""

    def test_counters_start_at_zero(self):
        metrics = MetricsManager()

        assert metrics.get_matched("dest", "Transaction") == 0
        assert metrics.get_filtered("dest", "Transaction") == 0

    def test_counts_by_destination_and_type(self):
        metrics = MetricsManager()

        metrics.log_matched_event("a", "Transaction")
        metrics.log_matched_event("a", "Transaction")
        metrics.log_matched_event("b", "Transaction")
        metrics.log_filtered_event("a", "NodeConnectError")

        assert metrics.get_matched("a", "Transaction") == 2
        assert metrics.get_matched("b", "Transaction") == 1
        assert metrics.get_filtered("a", "NodeConnectError") == 1

    def test_get_stats(self):
        metrics = MetricsManager()
        metrics.log_matched_event("a", "Transaction")
        metrics.log_filter_error("a", "/cosmos.bank.v1beta1.MsgSend")

        assert metrics.get_stats() == {
            "matched": {"a:Transaction": 1},
            "filtered": {},
            "filter_errors": {"a:/cosmos.bank.v1beta1.MsgSend": 1},
        }
