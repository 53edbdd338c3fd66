"""Typed HTTP client dispatching requests against a fixed base URL."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Mapping, Optional, Tuple, Type, TypeVar

import requests
from pydantic import ValidationError
from requests.structures import CaseInsensitiveDict

from .config import CourierSettings, load_settings
from .decoding import decode_json
from .dispatch import CompletionQueue, main_queue
from .errors import CourierConfigurationError, CourierError, status_error
from .form import CourierFormData
from .urls import build_url

T = TypeVar("T")

ResultCompletion = Callable[[Optional[Any], Optional[BaseException]], None]
DeleteCompletion = Callable[[Optional[BaseException]], None]

JSON_CONTENT_TYPE = "application/json"

logger = logging.getLogger(__name__)


def add_header_value(headers: CaseInsensitiveDict, name: str, value: str) -> None:
    """Add ``value`` to ``name``, appending to any existing value instead of replacing it."""
    existing = headers.get(name)
    headers[name] = value if existing is None else f"{existing}, {value}"


def is_success(status: int) -> bool:
    return 200 <= status <= 299


class Courier:
    """Issues GET/POST/PATCH/DELETE requests and decodes JSON responses.

    Requests run on the client's worker pool; outcomes are delivered to the
    completion callback on a single :class:`CompletionQueue`. Every operation
    returns a future that resolves to the delivered outcome once the callback
    has run.
    """

    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        settings: Optional[CourierSettings] = None,
        completion_queue: Optional[CompletionQueue] = None,
    ):
        if not (url.startswith("https://") or url.startswith("http://")):
            raise CourierConfigurationError("Courier url must start in https:// or http://")
        if not url.endswith("/"):
            raise CourierConfigurationError("Courier url must end in /")

        self._url = url
        self._settings = settings or load_settings()
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._completion = completion_queue or main_queue()
        self._pool = ThreadPoolExecutor(
            max_workers=self._settings.max_workers,
            thread_name_prefix="courier-transport",
        )

    @property
    def url(self) -> str:
        return self._url

    @property
    def settings(self) -> CourierSettings:
        return self._settings

    @property
    def completion_queue(self) -> CompletionQueue:
        return self._completion

    # -- public operations ---------------------------------------------------

    def get(
        self,
        path: str,
        result_type: Type[T],
        completion: Optional[ResultCompletion] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        queries: Optional[Mapping[str, Any]] = None,
    ) -> Future:
        handle_completion = self._result_handler(completion)
        try:
            request = self._new_request("GET", path, headers or {}, queries or {})
        except CourierError as e:
            return handle_completion(None, e)
        return self._submit(request, result_type, handle_completion)

    def post(
        self,
        path: str,
        result_type: Type[T],
        completion: Optional[ResultCompletion] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[bytes] = None,
    ) -> Future:
        handle_completion = self._result_handler(completion)
        try:
            request = self._new_request("POST", path, headers or {})
        except CourierError as e:
            return handle_completion(None, e)
        request.data = body
        return self._submit(request, result_type, handle_completion)

    def post_form(
        self,
        path: str,
        result_type: Type[T],
        form: CourierFormData,
        completion: Optional[ResultCompletion] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Future:
        handle_completion = self._result_handler(completion)
        try:
            request = self._new_multipart_request("POST", path, form, headers or {})
        except CourierError as e:
            return handle_completion(None, e)
        request.data = form.finalize()
        return self._submit(request, result_type, handle_completion)

    def patch(
        self,
        path: str,
        result_type: Type[T],
        body: bytes,
        completion: Optional[ResultCompletion] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Future:
        handle_completion = self._result_handler(completion)
        try:
            request = self._new_request("PATCH", path, headers or {})
        except CourierError as e:
            return handle_completion(None, e)
        request.data = body
        return self._submit(request, result_type, handle_completion)

    def delete(
        self,
        path: str,
        completion: Optional[DeleteCompletion] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Future:
        handle_completion = self._error_handler(completion)
        try:
            request = self._new_request("DELETE", path, headers or {})
        except CourierError as e:
            return handle_completion(e)
        return self._submit(request, None, handle_completion)

    # -- request construction ------------------------------------------------

    def _new_request(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str],
        queries: Optional[Mapping[str, Any]] = None,
    ) -> requests.Request:
        url = build_url(self._url, path, queries)
        request_headers = CaseInsensitiveDict()
        add_header_value(request_headers, "Content-Type", JSON_CONTENT_TYPE)
        for name, value in headers.items():
            add_header_value(request_headers, name, value)
        return requests.Request(method=method, url=url, headers=request_headers)

    def _new_multipart_request(
        self,
        method: str,
        path: str,
        form: CourierFormData,
        headers: Mapping[str, str],
    ) -> requests.Request:
        url = build_url(self._url, path)
        request_headers = CaseInsensitiveDict()
        request_headers["Content-Type"] = form.content_type
        for name, value in headers.items():
            add_header_value(request_headers, name, value)
        return requests.Request(method=method, url=url, headers=request_headers)

    # -- dispatch ------------------------------------------------------------

    def _submit(
        self,
        request: requests.Request,
        result_type: Optional[type],
        handle_completion: Callable[..., Future],
    ) -> Future:
        done: Future = Future()

        def relay(delivered: Future) -> None:
            if delivered.exception() is not None:
                done.set_exception(delivered.exception())
            else:
                done.set_result(delivered.result())

        def task() -> None:
            try:
                outcome = self._perform(request, result_type)
            except Exception as e:
                logger.exception(f"{request.method} {request.url} could not be completed")
                outcome = (e,) if result_type is None else (None, e)
            try:
                delivered = handle_completion(*outcome)
            except Exception as e:
                logger.exception(f"{request.method} {request.url} outcome could not be delivered")
                done.set_exception(e)
                return
            delivered.add_done_callback(relay)

        logger.debug(f"{request.method} {request.url} dispatched")
        self._pool.submit(task)
        return done

    def _perform(self, request: requests.Request, result_type: Optional[type]) -> Tuple:
        """Run one exchange on a worker thread and classify its outcome."""
        data: Optional[bytes] = None
        status: Optional[int] = None
        error: Optional[BaseException] = None
        try:
            prepared = self._session.prepare_request(request)
            response = self._session.send(prepared, timeout=self._settings.timeout)
            data, status = response.content, response.status_code
        except requests.RequestException as e:
            logger.warning(f"{request.method} {request.url} failed: {e}")
            error = e

        if result_type is None:
            return (self._delete_outcome(request, data, status, error),)
        return self._decode_outcome(request, result_type, data, status, error)

    def _decode_outcome(
        self,
        request: requests.Request,
        result_type: type,
        data: Optional[bytes],
        status: Optional[int],
        error: Optional[BaseException],
    ) -> Tuple[Optional[Any], Optional[BaseException]]:
        if status is not None and not is_success(status):
            logger.info(f"{request.method} {request.url} returned status {status}")
            return None, status_error(status, data, error)

        if error is not None or not data:
            return None, error

        try:
            return decode_json(result_type, data), None
        except ValidationError as e:
            logger.warning(
                f"{request.method} {request.url} body did not decode as "
                f"{getattr(result_type, '__name__', result_type)}: {e.error_count()} error(s)"
            )
            return None, e

    def _delete_outcome(
        self,
        request: requests.Request,
        data: Optional[bytes],
        status: Optional[int],
        error: Optional[BaseException],
    ) -> Optional[BaseException]:
        if status is not None and not is_success(status):
            logger.info(f"{request.method} {request.url} returned status {status}")
            return status_error(status, data, error)
        return error

    # -- completion ----------------------------------------------------------

    def _result_handler(self, completion: Optional[ResultCompletion]) -> Callable[..., Future]:
        def handle_completion(result: Optional[Any], error: Optional[BaseException]) -> Future:
            def run():
                logger.debug(f"Delivering result={type(result).__name__} error={error!r}")
                if completion is not None:
                    completion(result, error)
                return result, error

            return self._completion.deliver(run)

        return handle_completion

    def _error_handler(self, completion: Optional[DeleteCompletion]) -> Callable[..., Future]:
        def handle_completion(error: Optional[BaseException]) -> Future:
            def run():
                logger.debug(f"Delivering error={error!r}")
                if completion is not None:
                    completion(error)
                return error

            return self._completion.deliver(run)

        return handle_completion

    # -- lifecycle -----------------------------------------------------------

    def close(self) -> None:
        """Wait for in-flight requests and release the transport."""
        self._pool.shutdown(wait=True)
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "Courier":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Courier(url={self._url!r})"
