import logging
from unittest.mock import Mock

from cbxdrive.errors import InvalidTargetError
from cbxdrive.errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity
from cbxdrive.events.bus import EventBus


def test_handle_error_logs_and_publishes():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    error = InvalidTargetError("smart:wides")
    handler.handle(error, ErrorSeverity.ERROR, context={"operation": "move"})

    logger.error.assert_called()
    event = event_bus.publish.call_args[0][0]
    assert isinstance(event, ErrorOccurredEvent)
    assert event.error is error
    assert event.severity == ErrorSeverity.ERROR
    assert event.context == {"operation": "move"}


def test_default_severity_is_warning():
    logger = Mock(spec=logging.Logger)
    handler = ErrorHandler(logger, Mock(spec=EventBus))

    handler.handle(ValueError("boom"))

    logger.warning.assert_called()
    logger.error.assert_not_called()


def test_ui_callback_for_critical():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(RuntimeError("ui error"), ErrorSeverity.CRITICAL)

    callback.assert_called_with("ui error", ErrorSeverity.CRITICAL)


def test_ui_callback_skipped_below_error():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(Exception("info"), ErrorSeverity.WARNING)

    callback.assert_not_called()


def test_published_on_real_bus():
    bus = EventBus()
    received = []
    bus.subscribe(ErrorOccurredEvent, received.append)
    handler = ErrorHandler(logging.getLogger("cbxdrive.tests"), bus)

    handler.handle(InvalidTargetError("trash"))

    assert len(received) == 1
    assert isinstance(received[0].error, InvalidTargetError)
