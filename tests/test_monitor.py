from concurrent.futures import ThreadPoolExecutor

from mimiru.monitor import DatabaseEvent, DatabaseMonitorService


def test_unknown_channel_is_ignored():
    monitor = DatabaseMonitorService()
    seen = []
    monitor.register_event_handler("playback_sessions", seen.append)
    assert monitor.handle_notification("other_change", "x") is None
    assert seen == []


def test_playback_notification_reaches_handler():
    monitor = DatabaseMonitorService()
    seen = []
    monitor.register_event_handler("playback_sessions", seen.append)
    event = monitor.handle_notification("playback_sessions_change", "payload-1")
    assert event.table_name == "playback_sessions"
    assert event.event_type == "CHANGE"
    assert event.data == {"payload": "payload-1"}
    assert seen == [event]


def test_user_ratings_channel_maps_to_table():
    monitor = DatabaseMonitorService()
    seen = []
    monitor.register_event_handler("user_ratings", seen.append)
    monitor.register_event_handler("playback_sessions", seen.append)
    event = monitor.handle_notification("user_ratings_change", "p")
    assert event.table_name == "user_ratings"
    assert seen == [event]


def test_failing_handler_does_not_stop_others():
    monitor = DatabaseMonitorService()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    monitor.register_event_handler("playback_sessions", broken)
    monitor.register_event_handler("playback_sessions", seen.append)
    event = DatabaseEvent(table_name="playback_sessions", data={"user_id": 1})
    monitor.dispatch(event)
    assert seen == [event]


def test_handlers_run_on_executor():
    seen = []
    with ThreadPoolExecutor(max_workers=2) as executor:
        monitor = DatabaseMonitorService(executor)
        monitor.register_event_handler("playback_sessions", seen.append)
        monitor.register_event_handler("playback_sessions", seen.append)
        event = DatabaseEvent(table_name="playback_sessions")
        monitor.dispatch(event)
    assert seen == [event, event]


def test_dispatch_to_table_without_handlers_calls_nothing():
    monitor = DatabaseMonitorService()
    seen = []
    monitor.register_event_handler("user_ratings", seen.append)
    monitor.dispatch(DatabaseEvent(table_name="playback_sessions"))
    assert seen == []