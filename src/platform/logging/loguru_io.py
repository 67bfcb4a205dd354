from collections.abc import Awaitable, Generator, Iterator
from contextlib import contextmanager
from functools import wraps
from inspect import (
    iscoroutinefunction,
    isgeneratorfunction,
)
import types
from typing import TYPE_CHECKING, Any, Callable, Optional, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.generator_wrapper import GeneratorWrapper
from src.platform.logging.loguru_io_config import (
    ExtraField,
    GeneratorMethod,
    call_depth_var,
    custom_logger,
)
from src.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    get_chain_start_time,
    handle_yield,
    mask_sensitive,
    normalize_args_kwargs,
    reset_call_depth,
    should_mask_keyword,
    truncate_content,
)

_F = TypeVar('_F', bound=Callable[..., Any])


class LoguruIO:
    """
    I/O logging for one decorated callable.

    Every call logs its (masked) arguments and return value at DEBUG. A raised
    exception is logged once, however many decorated layers it crosses:
    domain failures (``CustomBaseError``) as a one-line ERROR, anything else
    with its traceback.
    """

    def __init__(
        self, custom_logger: 'LoguruLogger', *, reraise: bool = True, truncate_content: bool = False
    ) -> None:
        self._custom_logger = custom_logger
        self.reraise = reraise
        self.truncate_content = truncate_content
        self.extra: dict[str, Any] = {}
        self.depth = 2  # Skip the wrapper frames

    def _bound(self, *, extra_depth: int = 0) -> 'LoguruLogger':
        return self._custom_logger.bind(**self.extra).opt(depth=self.depth + extra_depth)

    def log_args_kwargs_content(
        self, *args: Any, yield_method: Optional[GeneratorMethod] = None, **kwargs: Any
    ) -> None:
        call_depth_var.set(call_depth_var.get() + 1)
        self.extra[ExtraField.CHAIN_START_TIME] = get_chain_start_time()
        if not settings.DEBUG:
            return
        self._bound().debug(
            f'{handle_yield(yield_method)}'
            f'args: {self.mask_sensitive(args)}, kwargs: {self.mask_sensitive(kwargs)}'
        )

    def log_return_content(
        self, return_value: Any, yield_method: Optional[GeneratorMethod] = None
    ) -> None:
        if settings.DEBUG:
            self._bound().debug(
                f'{handle_yield(yield_method)}return: {self.mask_sensitive(return_value)}'
            )

    def log_exception(self, e: Exception) -> None:
        if getattr(e, '_has_logged', False):
            return
        try:
            e._has_logged = True  # type: ignore[attr-defined]
        except AttributeError:
            pass
        bound = self._bound(extra_depth=2)
        if isinstance(e, CustomBaseError):
            bound.error(f'{type(e).__name__}[{e.kind or "-"}]: {e}')
        else:
            bound.exception(f'{type(e).__name__}: {e}')

    def mask_sensitive(self, data: Any) -> Any:
        if isinstance(data, dict):
            processed_data: Any = {
                key: self.mask_sensitive(should_mask_keyword(key, value))
                for key, value in data.items()
            }
        elif isinstance(data, list | tuple):
            processed_data = type(data)(self.mask_sensitive(item) for item in data)
        else:
            processed_data = mask_sensitive(data)
        return truncate_content(processed_data) if self.truncate_content else processed_data

    @contextmanager
    def _logged_call(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Iterator[None]:
        """
        Log entry, then log and re-raise (or swallow, with ``reraise=False``)
        whatever escapes the body. A swallowed exception makes the wrapper
        fall through to ``return None``.
        """
        self.log_args_kwargs_content(*args, **kwargs)
        try:
            yield
        except Exception as e:
            self.log_exception(e)
            if self.reraise:
                raise
        finally:
            reset_call_depth()

    def _hide_from_traceback(self, func: Callable[..., Any]) -> Callable[..., Any]:
        func.__code__ = func.__code__.replace(  # type: ignore[attr-defined]
            co_filename=cast(types.FunctionType, self._custom_logger.catch).__code__.co_filename
        )
        return func

    def __call__(self, func: _F) -> _F:
        self.extra[ExtraField.CALL_TARGET] = build_call_target_func_path(func)

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with self._logged_call(args, kwargs):
                    call_args, call_kwargs = normalize_args_kwargs(func, *args, **kwargs)
                    return_value = await cast(Awaitable[Any], func(*call_args, **call_kwargs))
                    self.log_return_content(return_value)
                    return return_value
                return None

            wrapper: Callable[..., Any] = async_wrapper

        elif isgeneratorfunction(func):

            @wraps(func)
            def generator_wrapper(*args: Any, **kwargs: Any) -> GeneratorWrapper | None:
                # Items are logged one by one as the caller pulls them
                with self._logged_call(args, kwargs):
                    gen_obj = cast(Generator[Any, Any, Any], func(*args, **kwargs))
                    return GeneratorWrapper(gen_obj, self)
                return None

            wrapper = generator_wrapper

        else:

            @wraps(func)
            def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
                with self._logged_call(args, kwargs):
                    call_args, call_kwargs = normalize_args_kwargs(func, *args, **kwargs)
                    return_value = func(*call_args, **call_kwargs)
                    self.log_return_content(return_value)
                    return return_value
                return None

            wrapper = sync_wrapper

        return cast(_F, self._hide_from_traceback(wrapper))


_P = ParamSpec('_P')
_T = TypeVar('_T')


class Logger:
    """
    Usage:
        @Logger.io
        async def purchase(self, *, event_id: str, owner_id: str, quantity: int): ...

        @Logger.io(reraise=False)
        def best_effort(): ...

        Logger.base.info('🎫 [PURCHASE] ...')
    """

    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate_content: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        io = LoguruIO(
            custom_logger=custom_logger, reraise=reraise, truncate_content=truncate_content
        )
        return io(func) if func else io
