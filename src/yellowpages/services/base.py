"""BaseService — foundation for all yellowpages services.

Every service receives a :class:`CatalogStore` at construction time and,
optionally, the resolved :class:`YpSettings`. Services reload whatever
records they need from disk on every call; there is no shared cache.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Concatenate, ParamSpec, TypeVar

from yellowpages.infrastructure.store import CatalogReadError
from yellowpages.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from yellowpages.config.settings import YpSettings
    from yellowpages.infrastructure.store import CatalogStore

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class DepsService(BaseService):
            def show(self, ref: str) -> ServiceResult:
                catalog = self._store.load_catalog()
                ...
    """

    def __init__(self, store: CatalogStore, settings: YpSettings | None = None) -> None:
        self._store = store
        if settings is None:
            from yellowpages.config.settings import YpSettings

            settings = YpSettings(catalog_root=store.root)
        self._settings = settings


def not_found(op: str, kind: str, ref: str) -> ServiceResult:
    return ServiceResult.failure(
        op, ErrorCode.NOT_FOUND, f"{kind.capitalize()} not found: {ref}", kind=kind, ref=ref
    )


_S = TypeVar("_S", bound=BaseService)
_P = ParamSpec("_P")


def catalog_op(
    op: str,
) -> Callable[
    [Callable[Concatenate[_S, _P], ServiceResult]],
    Callable[Concatenate[_S, _P], ServiceResult],
]:
    """Convert unreadable record files into an ``INVALID_RECORD`` failure for *op*."""

    def decorator(
        func: Callable[Concatenate[_S, _P], ServiceResult],
    ) -> Callable[Concatenate[_S, _P], ServiceResult]:
        @functools.wraps(func)
        def wrapper(self: _S, *args: _P.args, **kwargs: _P.kwargs) -> ServiceResult:
            try:
                return func(self, *args, **kwargs)
            except CatalogReadError as exc:
                logger.debug("Unreadable record during %s", op, exc_info=True)
                return ServiceResult.failure(
                    op,
                    ErrorCode.INVALID_RECORD,
                    str(exc),
                    path=str(exc.path),
                    reason=exc.reason,
                )

        return wrapper

    return decorator
