import time
import logging
from typing import Dict, Any, Optional
from datetime import datetime

logger = logging.getLogger("monitoring")

class StoreMonitoring:
    """In-process request and backend-failure metrics"""

    def __init__(self):
        self.reset()

    def reset(self):
        self.metrics = {
            "requests_total": 0,
            "requests_successful": 0,
            "requests_failed": 0,
            "backend_errors": 0,
            "average_response_time": 0,
            "last_error": None
        }
        self.started_at = time.time()

    def record_request(self, success: bool, response_time_ms: float):
        """Record API request metrics"""
        self.metrics["requests_total"] += 1

        if success:
            self.metrics["requests_successful"] += 1
        else:
            self.metrics["requests_failed"] += 1

        # Running average
        current_avg = self.metrics["average_response_time"]
        total_requests = self.metrics["requests_total"]
        self.metrics["average_response_time"] = (
            (current_avg * (total_requests - 1) + response_time_ms) / total_requests
        )

    def record_error(self, error: str, user_id: Optional[str] = None):
        """Record a backend failure"""
        self.metrics["backend_errors"] += 1
        self.metrics["last_error"] = {
            "error": error,
            "user_id": user_id,
            "timestamp": datetime.now().isoformat()
        }
        logger.error(f"Backend error: {error} (user: {user_id})")

    def get_health_status(self) -> Dict[str, Any]:
        """Get current system health"""
        total_requests = self.metrics["requests_total"]

        if total_requests == 0:
            success_rate = 100.0
        else:
            success_rate = (self.metrics["requests_successful"] / total_requests) * 100

        if success_rate >= 99 and self.metrics["average_response_time"] < 500:
            status = "EXCELLENT"
        elif success_rate >= 95 and self.metrics["average_response_time"] < 1000:
            status = "GOOD"
        elif success_rate >= 90:
            status = "WARNING"
        else:
            status = "CRITICAL"

        return {
            "status": status,
            "success_rate": round(success_rate, 2),
            "average_response_time_ms": round(self.metrics["average_response_time"], 2),
            "total_requests": total_requests,
            "backend_errors": self.metrics["backend_errors"],
            "last_error": self.metrics["last_error"],
            "uptime_seconds": round(time.time() - self.started_at, 1),
            "timestamp": datetime.now().isoformat()
        }

# Global monitoring instance
monitoring = StoreMonitoring()
