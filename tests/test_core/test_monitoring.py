from storefront.core.monitoring import RequestMonitor


def test_empty_monitor_is_excellent():
    status = RequestMonitor().get_health_status()
    assert status["status"] == "EXCELLENT"
    assert status["total_requests"] == 0


def test_failures_degrade_status():
    monitor = RequestMonitor()
    for _ in range(8):
        monitor.record_request(True, 10)
    for _ in range(2):
        monitor.record_request(False, 10)
    monitor.record_error("boom", path="/api/orders")

    status = monitor.get_health_status()
    assert status["success_rate"] == 80.0
    assert status["failed_requests"] == 2
    assert status["status"] == "CRITICAL"
    assert status["last_error"]["path"] == "/api/orders"

    monitor.reset()
    assert monitor.get_health_status()["total_requests"] == 0
