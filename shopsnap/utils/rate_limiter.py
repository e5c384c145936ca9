"""
Rate Limiter for ShopSnap Backend
Sliding window limit of requests per minute per client IP
"""
import time
import threading
from typing import Dict, List, Optional
from functools import wraps
from flask import current_app, request, jsonify


class RateLimiter:
    """Thread-safe rate limiter using sliding window algorithm."""

    def __init__(self, requests_per_minute: int = 60, window_seconds: int = 60):
        """
        Initialize rate limiter.

        Args:
            requests_per_minute: Maximum requests allowed per window per IP
            window_seconds: Length of the sliding window
        """
        self.requests_per_minute = requests_per_minute
        self._window_seconds = window_seconds
        self._requests: Dict[str, List[float]] = {}
        self._lock = threading.RLock()

    def _prune(self, client_id: str, now: float) -> List[float]:
        window_start = now - self._window_seconds
        timestamps = [ts for ts in self._requests.get(client_id, []) if ts > window_start]
        self._requests[client_id] = timestamps
        return timestamps

    def is_allowed(self, client_id: str) -> bool:
        """
        Check if a request from the client is allowed, recording it if so.

        Args:
            client_id: Client identifier (usually IP address)

        Returns:
            True if request is allowed, False if rate limited
        """
        with self._lock:
            now = time.time()
            timestamps = self._prune(client_id, now)
            if len(timestamps) < self.requests_per_minute:
                timestamps.append(now)
                return True
            return False

    def get_remaining(self, client_id: str) -> int:
        """Get remaining requests for a client in the current window."""
        with self._lock:
            timestamps = self._prune(client_id, time.time())
            return max(0, self.requests_per_minute - len(timestamps))

    def get_reset_time(self, client_id: str) -> Optional[float]:
        """Unix timestamp when the oldest request in the window expires."""
        with self._lock:
            timestamps = self._requests.get(client_id)
            if not timestamps:
                return None
            return min(timestamps) + self._window_seconds

    def cleanup(self) -> int:
        """
        Clean up clients with no requests in the window.

        Returns:
            Number of clients cleaned up
        """
        with self._lock:
            now = time.time()
            stale = [cid for cid in list(self._requests) if not self._prune(cid, now)]
            for client_id in stale:
                del self._requests[client_id]
            return len(stale)


def get_rate_limiter() -> RateLimiter:
    """Get or create the rate limiter for the current app."""
    limiter = current_app.extensions.get('shopsnap.rate_limiter')
    if limiter is None:
        limit = current_app.config.get('RATE_LIMIT_PER_MINUTE', 60)
        limiter = RateLimiter(requests_per_minute=limit)
        current_app.extensions['shopsnap.rate_limiter'] = limiter
    return limiter


def get_client_ip() -> str:
    """Get the client's IP address from the request."""
    # Check for X-Forwarded-For header (for proxied requests)
    if request.headers.get('X-Forwarded-For'):
        return request.headers.get('X-Forwarded-For').split(',')[0].strip()
    return request.remote_addr or 'unknown'


def rate_limit(func):
    """Decorator to apply rate limiting to an endpoint."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        limiter = get_rate_limiter()
        client_ip = get_client_ip()

        if not limiter.is_allowed(client_ip):
            reset_time = limiter.get_reset_time(client_ip)
            response = jsonify({
                'success': False,
                'error': 'Rate Limit Exceeded',
                'message': 'Too many requests. Please try again later.',
                'retry_after': int(reset_time - time.time()) if reset_time else 60
            })
            response.status_code = 429
            response.headers['X-RateLimit-Remaining'] = '0'
            if reset_time:
                response.headers['X-RateLimit-Reset'] = str(int(reset_time))
            return response

        response = current_app.make_response(func(*args, **kwargs))
        response.headers['X-RateLimit-Remaining'] = str(limiter.get_remaining(client_ip))
        response.headers['X-RateLimit-Limit'] = str(limiter.requests_per_minute)
        return response

    return wrapper
