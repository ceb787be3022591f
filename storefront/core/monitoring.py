import logging
import threading
from typing import Dict, Any, Optional
from datetime import datetime

logger = logging.getLogger(__name__)


class RequestMonitor:
    """In-process request metrics for the health endpoint"""

    def __init__(self):
        self._lock = threading.Lock()
        self.reset()

    def reset(self):
        with self._lock:
            self.metrics = {
                "requests_total": 0,
                "requests_successful": 0,
                "requests_failed": 0,
                "average_response_time": 0.0,
                "last_error": None,
            }

    def record_request(self, success: bool, response_time_ms: float):
        """Record API request metrics"""
        with self._lock:
            self.metrics["requests_total"] += 1

            if success:
                self.metrics["requests_successful"] += 1
            else:
                self.metrics["requests_failed"] += 1

            # Update running average
            current_avg = self.metrics["average_response_time"]
            total_requests = self.metrics["requests_total"]
            self.metrics["average_response_time"] = (
                (current_avg * (total_requests - 1) + response_time_ms) / total_requests
            )

    def record_error(self, error: str, path: Optional[str] = None):
        """Record an unhandled server error"""
        with self._lock:
            self.metrics["last_error"] = {
                "error": error,
                "path": path,
                "timestamp": datetime.now().isoformat(),
            }
        logger.error(f"System error: {error} (path: {path})")

    def get_health_status(self) -> Dict[str, Any]:
        """Get current system health"""
        with self._lock:
            metrics = dict(self.metrics)

        total_requests = metrics["requests_total"]
        if total_requests == 0:
            success_rate = 100.0
        else:
            success_rate = (metrics["requests_successful"] / total_requests) * 100

        if success_rate >= 99 and metrics["average_response_time"] < 500:
            status = "EXCELLENT"
        elif success_rate >= 95 and metrics["average_response_time"] < 1000:
            status = "GOOD"
        elif success_rate >= 90:
            status = "WARNING"
        else:
            status = "CRITICAL"

        return {
            "status": status,
            "success_rate": round(success_rate, 2),
            "average_response_time_ms": round(metrics["average_response_time"], 2),
            "total_requests": total_requests,
            "failed_requests": metrics["requests_failed"],
            "last_error": metrics["last_error"],
            "timestamp": datetime.now().isoformat(),
        }


# Global monitoring instance
monitoring = RequestMonitor()
