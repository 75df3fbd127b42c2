"""JSON HTTP client with retries for the configuration backend."""
import time
import logging
import requests

logger = logging.getLogger("nocconfig.http")


class APIError(Exception):
    """API request error with status code and response body."""
    def __init__(self, message, status_code=None, response_body=None, source=None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
        self.source = source


class HTTPClient:
    """Thin requests wrapper: JSON in/out, retry with backoff on transient failures."""

    RETRYABLE_STATUS = {429, 500, 502, 503, 504}
    NON_RETRYABLE_STATUS = {400, 401, 403, 404, 405, 409, 422}
    MAX_BACKOFF = 30

    def __init__(self, base_url, timeout=10, max_retries=2, source=None, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.source = source
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "NOCConfig/1.0",
            "Accept": "application/json",
        })

    def get(self, path="", params=None):
        return self._request("GET", path, params=params)

    def post(self, path, data=None):
        return self._request("POST", path, json_body=data)

    def put(self, path, data=None):
        return self._request("PUT", path, json_body=data)

    def delete(self, path):
        return self._request("DELETE", path)

    def close(self):
        self.session.close()

    def _backoff(self, attempt):
        return min(2 ** attempt, self.MAX_BACKOFF)

    def _request(self, method, path, params=None, json_body=None):
        url = f"{self.base_url}/{path.lstrip('/')}" if path else self.base_url

        last_error = None
        for attempt in range(self.max_retries + 1):
            try:
                start = time.time()
                resp = self.session.request(method, url, params=params, json=json_body,
                                            timeout=self.timeout)
                latency = int((time.time() - start) * 1000)
                logger.debug(f"{method} {url} → {resp.status_code} ({latency}ms)")

                if 200 <= resp.status_code < 300:
                    if resp.status_code == 204 or not resp.content:
                        return None
                    try:
                        return resp.json()
                    except ValueError:
                        return resp.text

                if resp.status_code in self.NON_RETRYABLE_STATUS:
                    raise APIError(
                        f"HTTP {resp.status_code} from {method} {url}",
                        status_code=resp.status_code,
                        response_body=resp.text,
                        source=self.source,
                    )

                if resp.status_code in self.RETRYABLE_STATUS:
                    retry_after = resp.headers.get("Retry-After")
                    wait = float(retry_after) if retry_after else self._backoff(attempt)
                    last_error = APIError(f"HTTP {resp.status_code} from {method} {url}",
                                          status_code=resp.status_code, source=self.source)
                    if attempt < self.max_retries:
                        logger.warning(f"Retryable {resp.status_code} from {url}, waiting {wait:.1f}s (attempt {attempt + 1})")
                        time.sleep(wait)
                    continue

                raise APIError(f"Unexpected HTTP {resp.status_code} from {method} {url}",
                               status_code=resp.status_code, source=self.source)

            except requests.exceptions.RequestException as e:
                logger.warning(f"Request error for {method} {url}: {e} (attempt {attempt + 1})")
                last_error = APIError(str(e), source=self.source)
                if attempt < self.max_retries:
                    time.sleep(self._backoff(attempt))

        raise last_error or APIError(f"Max retries exceeded for {url}", source=self.source)
