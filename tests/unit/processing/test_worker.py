import pytest
from unittest.mock import MagicMock, patch
from tx_router.processing.worker import Worker, WorkerPool
from tx_router.processing.dispatcher import Dispatcher
from tx_router.utils.exceptions import HeightParseError, ProcessingError


class TestWorker:
    """Test cases for Worker implementation"""

    @pytest.fixture
    def mock_dispatcher(self):
        """Fixture to provide a mock dispatcher."""
        dispatcher = MagicMock(spec=Dispatcher)
        return dispatcher

    @pytest.fixture
    def worker(self, mock_dispatcher):
        """Fixture to provide a Worker instance."""
        return Worker(dispatcher=mock_dispatcher)

    def test_worker_init(self, worker, mock_dispatcher):
        """Test worker initialization."""
        assert worker.dispatcher == mock_dispatcher
        assert worker.running is True

    def test_run_stop_flow(self, worker, mock_dispatcher):
        """Test run method with normal stop flow."""

        def set_stop():
            worker.running = False
            return True

        mock_dispatcher.process_next.side_effect = set_stop

        worker.run()

        mock_dispatcher.start.assert_called_once()
        mock_dispatcher.process_next.assert_called_once()
        mock_dispatcher.stop.assert_called_once()

    def test_run_stops_dispatcher_after_stop_call(self, worker, mock_dispatcher):
        """Test that stop() ends the loop and the dispatcher is still stopped."""

        def request_stop():
            worker.stop()
            return True

        mock_dispatcher.process_next.side_effect = request_stop

        worker.run()

        mock_dispatcher.stop.assert_called_once()

    def test_run_with_exception(self, worker, mock_dispatcher):
        """Test run method with exception during processing."""
        mock_dispatcher.process_next.side_effect = Exception("Test error")

        with pytest.raises(ProcessingError) as exc_info:
            worker.run()

        assert "Processing failed: Test error" in str(exc_info.value)
        mock_dispatcher.stop.assert_called_once()

    def test_run_reraises_height_parse_error(self, worker, mock_dispatcher):
        """Test that invalid heights are not wrapped or swallowed."""
        mock_dispatcher.process_next.side_effect = HeightParseError("bad height")

        with pytest.raises(HeightParseError):
            worker.run()

        mock_dispatcher.stop.assert_called_once()

    def test_run_process_multiple_batches(self, worker, mock_dispatcher):
        """Test processing multiple batches."""
        call_count = 0

        def process_and_count():
            nonlocal call_count
            call_count += 1
            if call_count >= 3:
                worker.running = False
            return True

        mock_dispatcher.process_next.side_effect = process_and_count

        worker.run()

        assert mock_dispatcher.process_next.call_count == 3
        mock_dispatcher.stop.assert_called_once()

    def test_idle_backoff_sleeps(self, worker, mock_dispatcher):
        """Test that repeated empty polls trigger a back-off sleep."""
        call_count = 0

        def idle():
            nonlocal call_count
            call_count += 1
            if call_count >= 12:
                worker.running = False
            return False

        mock_dispatcher.process_next.side_effect = idle

        with patch("tx_router.processing.worker.time.sleep") as mock_sleep:
            worker.run()

        assert mock_sleep.call_count == 3
        assert mock_sleep.call_args_list[0].args[0] == pytest.approx(0.1)

    def test_stop(self, worker):
        """Test stop method."""
        worker.stop()

        assert not worker.running

    def test_stop_twice_is_ignored(self, worker):
        worker.stop()
        worker.stop()

        assert not worker.running


class TestWorkerPool:
    """Test cases for WorkerPool"""

    def test_runs_every_worker(self):
        workers = [MagicMock(spec=Worker), MagicMock(spec=Worker)]
        pool = WorkerPool(workers)

        pool.start()
        pool.join()

        for worker in workers:
            worker.run.assert_called_once()

    def test_error_stops_other_workers_and_is_raised(self):
        failing = MagicMock(spec=Worker)
        failing.run.side_effect = HeightParseError("bad height")
        other = MagicMock(spec=Worker)
        pool = WorkerPool([failing, other])

        pool.start()
        with pytest.raises(HeightParseError):
            pool.join()

        other.stop.assert_called()

    def test_stop_stops_every_worker(self):
        workers = [MagicMock(spec=Worker), MagicMock(spec=Worker)]

        WorkerPool(workers).stop()

        for worker in workers:
            worker.stop.assert_called_once()
