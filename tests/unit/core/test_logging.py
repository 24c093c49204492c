from unittest.mock import MagicMock, patch

import pytest

from src.core.utils.logging import log_operation


class TestLogOperation:
    @pytest.mark.asyncio
    async def test_logs_start_and_completion(self) -> None:
        bound = MagicMock()
        with patch("src.core.utils.logging.logger") as mock_logger:
            mock_logger.bind.return_value = bound
            async with log_operation("dispatch", event="push"):
                pass

        mock_logger.bind.assert_called_once_with(operation="dispatch", event="push")
        assert [call.args[0] for call in bound.info.call_args_list] == ["operation_started", "operation_completed"]
        bound.error.assert_not_called()

    @pytest.mark.asyncio
    async def test_logs_failure_and_reraises(self) -> None:
        bound = MagicMock()
        with patch("src.core.utils.logging.logger") as mock_logger:
            mock_logger.bind.return_value = bound
            with pytest.raises(ValueError):
                async with log_operation("dispatch"):
                    raise ValueError("bad")

        assert bound.error.call_args.args[0] == "operation_failed"
        assert bound.error.call_args.kwargs["error"] == "bad"
